from datetime import date
from decimal import Decimal

import pytest

from ptax_calculator.amounts import yearly_amount
from ptax_calculator.breakdown import (
    build_breakdown,
    build_installments,
    describe_collection_months,
    describe_salary_range,
    empty_breakdown,
    frequency_text,
)
from ptax_calculator.models import CollectionMode


@pytest.mark.unit
def test_monthly_installments_follow_session_order(make_slab):
    slab = make_slab(monthlyPTaxAmt=200, overrideAmt="2#300")
    installments = build_installments(slab)

    assert [item.month for item in installments] == [4, 5, 6, 7, 8, 9, 10, 11, 12, 1, 2, 3]
    assert installments[0].period == "April"
    assert installments[-1].period == "March"
    assert all(item.frequency == "Monthly" for item in installments)

    february = installments[10]
    assert february.period == "February"
    assert february.amount == Decimal("300")
    assert february.is_override is True
    assert sum(item.amount for item in installments) == Decimal("2500")


@pytest.mark.unit
def test_calendar_year_session(make_slab):
    slab = make_slab(ptaxSessionFromMonth="JANUARY", ptaxSessionToMonth="DECEMBER")
    assert [item.period for item in build_installments(slab)][:2] == ["January", "February"]


@pytest.mark.unit
def test_non_monthly_installment(make_slab):
    slab = make_slab(monthlyPTaxAmt=450, collectionMode="HALF YEARLY", ptaxCollectionMonth="H:2,8")
    installments = build_installments(slab)

    assert len(installments) == 1
    assert installments[0].period == "Half-Yearly"
    assert installments[0].amount == Decimal("450")
    assert installments[0].frequency == "2 times per year"
    assert installments[0].month is None


@pytest.mark.unit
def test_yearly_installment_without_listed_months(make_slab):
    slab = make_slab(monthlyPTaxAmt=2500, collectionMode="YEARLY")
    (installment,) = build_installments(slab)
    assert installment.frequency == "1 time per year"
    assert installment.amount == Decimal("0")


@pytest.mark.unit
def test_frequency_text():
    assert frequency_text(1) == "1 time per year"
    assert frequency_text(4) == "4 times per year"


@pytest.mark.unit
def test_salary_range_text(make_slab):
    assert describe_salary_range(make_slab()) == "₹15,001 - ₹25,000"
    assert describe_salary_range(make_slab(amtFrom=25001, amtTo=None)) == "₹25,001 - Above"
    assert describe_salary_range(make_slab(amtFrom=None, amtTo=7500)) == "₹0 - ₹7,500"


@pytest.mark.unit
def test_collection_month_text(make_slab):
    assert describe_collection_months(make_slab()) is None
    slab = make_slab(collectionMode="HALF YEARLY", ptaxCollectionMonth="H:8,2")
    assert describe_collection_months(slab) == "February, August"
    broken = make_slab(collectionMode="YEARLY", ptaxCollectionMonth="Y:13")
    assert describe_collection_months(broken) == "Y:13"


@pytest.mark.unit
def test_build_breakdown(make_slab):
    slab = make_slab(
        amtFrom=300001,
        amtTo=500000,
        monthlyPTaxAmt=1000,
        collectionMode="YEARLY",
        ptaxCollectionMonth="Y:10",
    )
    breakdown = build_breakdown(slab, date(2025, 10, 1))

    assert breakdown.monthly_amount == Decimal("1000")
    assert breakdown.yearly_amount == Decimal("1000")
    assert breakdown.collection_mode == CollectionMode.YEARLY
    assert breakdown.salary_range == "₹3,00,001 - ₹5,00,000"
    assert breakdown.tax_session == "April 2025 to March 2026"
    assert breakdown.collection_months == "October"
    assert breakdown.message is None


@pytest.mark.unit
def test_empty_breakdown():
    breakdown = empty_breakdown("Salary outside any slab")
    assert breakdown.monthly_amount == Decimal("0")
    assert breakdown.yearly_amount == Decimal("0")
    assert breakdown.collection_mode is None
    assert breakdown.installments == ()
    assert breakdown.message == "Salary outside any slab"


def scheduled_total(installments):
    if len(installments) == 1 and installments[0].month is None:
        count = int(installments[0].frequency.split()[0])
        return installments[0].amount * count
    return sum((item.amount for item in installments), Decimal("0"))


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"overrideAmt": "50"},
        {"overrideAmt": "10#1500"},
        {"overrideAmt": "3#50"},
        {"overrideAmt": None},
        {"overrideAmt": "2#500", "collectionMode": "HALF YEARLY", "ptaxCollectionMonth": "H:2,8"},
        {"overrideAmt": None, "ptaxCollectionMonth": None},
    ],
)
def test_schedule_totals_the_yearly_amount(make_slab, overrides):
    record = {"monthlyPTaxAmt": 1000, "collectionMode": "YEARLY", "ptaxCollectionMonth": "Y:10"}
    record.update(overrides)
    slab = make_slab(**record)
    assert scheduled_total(build_installments(slab)) == yearly_amount(slab)


@pytest.mark.unit
def test_bare_override_on_yearly_slab_lists_every_month(make_slab):
    slab = make_slab(monthlyPTaxAmt=1000, collectionMode="YEARLY", ptaxCollectionMonth="Y:10", overrideAmt="50")
    installments = build_installments(slab)

    assert len(installments) == 12
    assert all(item.amount == Decimal("50") and item.is_override for item in installments)
    assert yearly_amount(slab) == Decimal("600")


@pytest.mark.unit
def test_month_override_on_collection_month(make_slab):
    slab = make_slab(monthlyPTaxAmt=1000, collectionMode="YEARLY", ptaxCollectionMonth="Y:10", overrideAmt="10#1500")
    (installment,) = build_installments(slab)

    assert installment.period == "October"
    assert installment.amount == Decimal("1500")
    assert installment.frequency == "Yearly"
    assert installment.is_override is True


@pytest.mark.unit
def test_month_override_outside_collection_months(make_slab):
    slab = make_slab(monthlyPTaxAmt=1000, collectionMode="YEARLY", ptaxCollectionMonth="Y:10", overrideAmt="3#50")
    installments = build_installments(slab)

    assert [(item.period, item.amount, item.frequency) for item in installments] == [
        ("October", Decimal("1000"), "Yearly"),
        ("March", Decimal("50"), "Override"),
    ]
