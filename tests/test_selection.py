from datetime import date
from decimal import Decimal

import pytest

from ptax_calculator.models import Gender
from ptax_calculator.selection import gender_applies, match_salary_band, select_slabs


@pytest.fixture
def assam_slabs(make_slab):
    return [
        make_slab(amtFrom=10001, amtTo=15000, monthlyPTaxAmt=150),
        make_slab(amtFrom=15001, amtTo=25000, monthlyPTaxAmt=180),
        make_slab(amtFrom=25001, amtTo=None, monthlyPTaxAmt=208),
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "salary, expected",
    [
        ("10001", 150),
        ("15000", 150),
        ("15001", 180),
        ("25000", 180),
        ("25001", 208),
        ("9999999", 208),
    ],
)
def test_salary_bounds_are_inclusive(assam_slabs, salary, expected):
    slab = match_salary_band(assam_slabs, Decimal(salary))
    assert slab is not None
    assert slab.base_amount == Decimal(expected)


@pytest.mark.unit
def test_salary_below_every_band(assam_slabs):
    assert match_salary_band(assam_slabs, Decimal("10000")) is None


@pytest.mark.unit
def test_fractional_salary_between_bands_matches_nothing(assam_slabs):
    assert match_salary_band(assam_slabs, Decimal("15000.50")) is None


@pytest.mark.unit
def test_missing_lower_bound_starts_at_zero(make_slab):
    slab = make_slab(amtFrom=None, amtTo=7500, monthlyPTaxAmt=0)
    assert match_salary_band([slab], Decimal("0")) is slab
    assert match_salary_band([slab], Decimal("7500")) is slab


@pytest.mark.unit
def test_gender_specific_slab_wins_over_all(make_slab):
    for_all = make_slab(amtFrom=10001, amtTo=None, monthlyPTaxAmt=200, gender="All")
    for_women = make_slab(amtFrom=10001, amtTo=None, monthlyPTaxAmt=0, gender="Female")
    assert match_salary_band([for_all, for_women], Decimal("20000")) is for_women


@pytest.mark.unit
def test_table_order_breaks_remaining_ties(make_slab):
    first = make_slab(amtFrom=10001, amtTo=None, monthlyPTaxAmt=200)
    second = make_slab(amtFrom=10001, amtTo=None, monthlyPTaxAmt=250)
    assert match_salary_band([first, second], Decimal("20000")) is first


@pytest.mark.unit
@pytest.mark.parametrize(
    "slab_gender, requested, applies",
    [
        ("All", Gender.MALE, True),
        ("All", Gender.ALL, True),
        ("Male", Gender.MALE, True),
        ("Male", Gender.FEMALE, False),
        ("Male", Gender.ALL, False),
        ("Female", Gender.FEMALE, True),
    ],
)
def test_gender_filter(make_slab, slab_gender, requested, applies):
    assert gender_applies(make_slab(gender=slab_gender), requested) is applies


@pytest.mark.unit
@pytest.mark.parametrize(
    "on_date, selected",
    [
        (date(2025, 3, 31), False),
        (date(2025, 4, 1), True),
        (date(2025, 12, 31), True),
        (date(2026, 3, 1), True),
        (date(2026, 3, 2), False),
    ],
)
def test_validity_window(make_slab, on_date, selected):
    slab = make_slab()
    assert (select_slabs([slab], 18, Gender.ALL, on_date) == [slab]) is selected


@pytest.mark.unit
def test_open_ended_validity(make_slab):
    slab = make_slab(ptaxFromYear=None, ptaxToYear=None)
    assert select_slabs([slab], 18, Gender.ALL, date(1999, 1, 1)) == [slab]
    assert select_slabs([slab], 18, Gender.ALL, date(2099, 1, 1)) == [slab]


@pytest.mark.unit
def test_selection_filters_by_jurisdiction(make_slab):
    assam = make_slab()
    bihar = make_slab(stateGovId=10)
    assert select_slabs([assam, bihar], 10, Gender.ALL, date(2025, 6, 1)) == [bihar]


@pytest.mark.unit
def test_missing_session_month_leaves_that_bound_open(make_slab):
    slab = make_slab(ptaxSessionFromMonth=None, ptaxFromYear=2025)
    assert select_slabs([slab], 18, Gender.ALL, date(2025, 1, 15)) == [slab]
    assert select_slabs([slab], 18, Gender.ALL, date(2026, 3, 2)) == []
