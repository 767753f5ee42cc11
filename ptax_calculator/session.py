from __future__ import annotations

from typing import Any

from ptax_calculator.models import DEFAULT_SESSION_FROM_MONTH, DEFAULT_SESSION_TO_MONTH, Slab
from ptax_calculator.rules import month_name, parse_month


def order_session_months(from_month: Any, to_month: Any) -> list[int]:
    """
    Calendar months of a fiscal session in display order.

    (April, March) -> [4, 5, ..., 12, 1, 2, 3]; (January, December) -> [1, ..., 12].
    Unrecognised bounds fall back to April and March.
    """
    start = parse_month(from_month) or DEFAULT_SESSION_FROM_MONTH
    end = parse_month(to_month) or DEFAULT_SESSION_TO_MONTH

    if start <= end:
        head = list(range(start, end + 1))
    else:
        head = list(range(start, 13)) + list(range(1, end + 1))
    # Sessions shorter than a year still list every month, trailing months last.
    tail = [month for month in order_from(end + 1) if month not in head]
    return head + tail


def order_from(start: int) -> list[int]:
    return [((start - 1 + offset) % 12) + 1 for offset in range(12)]


def session_months_for(slab: Slab) -> list[int]:
    return order_session_months(slab.session_from_month, slab.session_to_month)


def describe_session(slab: Slab) -> str:
    from_month = slab.session_from_month or DEFAULT_SESSION_FROM_MONTH
    to_month = slab.session_to_month or DEFAULT_SESSION_TO_MONTH
    start = f"{month_name(from_month)} {slab.from_year}" if slab.from_year else month_name(from_month)
    end = f"{month_name(to_month)} {slab.to_year}" if slab.to_year else month_name(to_month)
    return f"{start} to {end}"
