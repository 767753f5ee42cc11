from __future__ import annotations

from decimal import Decimal

from ptax_calculator.models import CollectionMode, Slab

ZERO = Decimal("0")


def resolve_amount(slab: Slab, month: int) -> Decimal:
    """
    Amount payable under `slab` in calendar `month` (1..12).

    Resolution order:
    1. A bare override replaces the base amount in every month.
    2. A month#amount override applies in exactly that month.
    3. Monthly slabs pay the base amount.
    4. Other modes pay the base amount in their collection months and 0 otherwise.
       A slab without collection months never pays.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    if slab.override_flat is not None:
        return slab.override_flat

    month_override = slab.override_by_month.get(month)
    if month_override is not None:
        return month_override

    if slab.collection_mode == CollectionMode.MONTHLY:
        return slab.base_amount

    if slab.collection_months is not None and month in slab.collection_months:
        return slab.base_amount
    return ZERO


def yearly_amount(slab: Slab, year: int | None = None) -> Decimal:
    """Total payable over calendar months 1..12 of `year`."""
    # Resolution depends on the month only, so every year aggregates the same way.
    total = ZERO
    for month in range(1, 13):
        total += resolve_amount(slab, month)
    return total


def is_override_month(slab: Slab, month: int) -> bool:
    return slab.override_flat is not None or month in slab.override_by_month


def collection_count(slab: Slab) -> int:
    """Number of collection events per year for a slab."""
    if slab.collection_mode == CollectionMode.MONTHLY:
        return 12
    if slab.collection_months is not None:
        return len(slab.collection_months)
    return slab.collection_mode.nominal_count
