from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ptax_calculator.amounts import ZERO, collection_count, is_override_month, resolve_amount, yearly_amount
from ptax_calculator.models import CollectionMode, Slab
from ptax_calculator.money import format_inr
from ptax_calculator.rules import month_name
from ptax_calculator.session import describe_session, session_months_for


@dataclass(frozen=True)
class Installment:
    period: str
    amount: Decimal
    frequency: str
    month: int | None = None
    is_override: bool = False


@dataclass(frozen=True)
class Breakdown:
    monthly_amount: Decimal
    yearly_amount: Decimal
    collection_mode: CollectionMode | None
    salary_range: str | None = None
    tax_session: str | None = None
    collection_months: str | None = None
    installments: tuple[Installment, ...] = ()
    message: str | None = None


def describe_salary_range(slab: Slab) -> str:
    upper = format_inr(slab.amt_to) if slab.amt_to is not None else "Above"
    return f"{format_inr(slab.effective_from)} - {upper}"


def describe_collection_months(slab: Slab) -> str | None:
    if slab.collection_month_spec is None:
        return None
    if not slab.collection_months:
        return slab.collection_month_spec
    return ", ".join(month_name(month) for month in sorted(slab.collection_months))


def frequency_text(count: int) -> str:
    return "1 time per year" if count == 1 else f"{count} times per year"


def build_installments(slab: Slab) -> tuple[Installment, ...]:
    """
    Payment schedule for a slab.

    Monthly slabs, and slabs whose bare override applies in every month, list
    each month of the session. Other modes collapse into a single entry
    carrying the per-event amount; when month overrides change some events,
    each paying month is listed instead. The schedule always totals the yearly amount.
    """
    if slab.collection_mode == CollectionMode.MONTHLY or slab.override_flat is not None:
        return tuple(
            Installment(
                period=month_name(month),
                amount=resolve_amount(slab, month),
                frequency="Monthly",
                month=month,
                is_override=is_override_month(slab, month),
            )
            for month in session_months_for(slab)
        )

    collection = slab.collection_months or frozenset()
    paying = [month for month in session_months_for(slab) if month in collection or month in slab.override_by_month]
    if not any(month in slab.override_by_month for month in paying):
        return (
            Installment(
                period=slab.collection_mode.label,
                amount=slab.base_amount if collection else ZERO,
                frequency=frequency_text(collection_count(slab)),
            ),
        )

    return tuple(
        Installment(
            period=month_name(month),
            amount=resolve_amount(slab, month),
            frequency=slab.collection_mode.label if month in collection else "Override",
            month=month,
            is_override=is_override_month(slab, month),
        )
        for month in paying
    )


def build_breakdown(slab: Slab, on_date: date) -> Breakdown:
    return Breakdown(
        monthly_amount=resolve_amount(slab, on_date.month),
        yearly_amount=yearly_amount(slab, on_date.year),
        collection_mode=slab.collection_mode,
        salary_range=describe_salary_range(slab),
        tax_session=describe_session(slab),
        collection_months=describe_collection_months(slab),
        installments=build_installments(slab),
    )


def empty_breakdown(message: str) -> Breakdown:
    return Breakdown(
        monthly_amount=Decimal("0"),
        yearly_amount=Decimal("0"),
        collection_mode=None,
        message=message,
    )
