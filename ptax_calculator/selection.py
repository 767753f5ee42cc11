from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from ptax_calculator.models import Gender, Slab


def gender_applies(slab: Slab, gender: Gender) -> bool:
    return slab.gender == gender or slab.gender == Gender.ALL


def select_slabs(slabs: Iterable[Slab], gov_id: int, gender: Gender, on_date: date) -> list[Slab]:
    """Slabs of one jurisdiction that apply to `gender` and are in force on `on_date`."""
    return [
        slab
        for slab in slabs
        if slab.state_gov_id == gov_id and gender_applies(slab, gender) and slab.is_valid_on(on_date)
    ]


def match_salary_band(slabs: list[Slab], salary: Decimal) -> Slab | None:
    """
    First slab whose inclusive [amt_from, amt_to] range contains `salary`.

    Gender-specific slabs are tried before slabs for all genders; ties keep
    their table order.
    """
    ordered = sorted(slabs, key=lambda slab: slab.gender == Gender.ALL)
    for slab in ordered:
        if slab.covers_salary(salary):
            return slab
    return None
