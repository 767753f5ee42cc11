"""
Rule-string parsing for PTax slabs.

Slab tables carry two free-form columns that drive the monthly amount:

- Override Amt: either a bare amount (``"250"``) applying to every month, or
  ``month#amount`` pairs separated by ``;`` (``"2#300;6#450"``) that replace the
  base amount in exactly those months.
- PTax Collection Month: ``<mode letter>:<comma separated months>`` (``"H:2,8"``)
  naming the calendar months in which a non-monthly slab is collected.

Both are parsed once when a slab is loaded. A clause that does not parse is
dropped with a warning; reference data problems never abort a calculation.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "JANUARY",
    "FEBRUARY",
    "MARCH",
    "APRIL",
    "MAY",
    "JUNE",
    "JULY",
    "AUGUST",
    "SEPTEMBER",
    "OCTOBER",
    "NOVEMBER",
    "DECEMBER",
)
MONTH_BY_NAME = {name: index for index, name in enumerate(MONTH_NAMES, start=1)}
MONTH_BY_NAME.update({name[:3]: index for index, name in enumerate(MONTH_NAMES, start=1)})
MODE_LETTERS = {"M", "Q", "H", "Y"}
NULL_TOKENS = {"", "null", "none", "n/a"}
OVERRIDE_CLAUSE_RE = re.compile(r"^\s*(\d{1,2})\s*#\s*([^#]+?)\s*$")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in NULL_TOKENS


def parse_decimal(value: Any) -> Decimal | None:
    """Convert a table cell to Decimal, or None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_month(value: Any) -> int | None:
    """Accept a month name (full or three letters, any case) or a number 1..12."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 1 <= value <= 12 else None
    text = str(value).strip().upper()
    if text.isdigit():
        number = int(text)
        return number if 1 <= number <= 12 else None
    return MONTH_BY_NAME.get(text)


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1].title()


def parse_override(raw: Any, context: str = "") -> tuple[Decimal | None, dict[int, Decimal]]:
    """
    Parse an Override Amt cell.

    Returns:
        (flat, by_month)
        flat: amount replacing the base amount in every month, or None.
        by_month: exact-month replacements keyed by calendar month.
    """
    if is_blank(raw):
        return None, {}

    if not isinstance(raw, str):
        flat = parse_decimal(raw)
        if flat is None:
            logger.warning(f"Ignoring malformed override amount {raw!r}{context}.")
        return flat, {}

    text = raw.strip()
    if "#" not in text:
        flat = parse_decimal(text)
        if flat is None:
            logger.warning(f"Ignoring malformed override amount {raw!r}{context}.")
        return flat, {}

    by_month: dict[int, Decimal] = {}
    for clause in text.split(";"):
        if not clause.strip():
            continue
        match = OVERRIDE_CLAUSE_RE.match(clause)
        month = parse_month(match.group(1)) if match else None
        amount = parse_decimal(match.group(2)) if match else None
        if month is None or amount is None:
            logger.warning(f"Ignoring malformed override clause {clause.strip()!r} in {raw!r}{context}.")
            continue
        if month in by_month:
            logger.warning(f"Duplicate override for month {month} in {raw!r}{context}; keeping the last one.")
        by_month[month] = amount

    return None, by_month


def parse_collection_months(raw: Any, mode_letter: str | None = None, context: str = "") -> frozenset[int] | None:
    """
    Parse a PTax Collection Month cell such as ``"Y:10"`` or ``"H:2,8"``.

    The months are an explicit list; nothing is derived from an offset.
    Returns None when the cell is empty or cannot be parsed.
    """
    if is_blank(raw):
        return None

    text = str(raw).strip()
    letter, sep, months_part = text.partition(":")
    letter = letter.strip().upper()
    if not sep or letter not in MODE_LETTERS:
        logger.warning(f"Ignoring malformed collection month spec {raw!r}{context}.")
        return None

    months: set[int] = set()
    for token in months_part.split(","):
        month = parse_month(token)
        if month is None:
            logger.warning(f"Ignoring malformed collection month spec {raw!r}{context}.")
            return None
        months.add(month)

    if mode_letter and letter != mode_letter:
        logger.warning(
            f"Collection month spec {raw!r}{context} uses mode letter {letter} "
            f"but the slab is collected with mode letter {mode_letter}."
        )

    return frozenset(months)
