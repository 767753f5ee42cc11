from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

RUPEE = "₹"


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip().replace(",", ""))


def as_float(value: Decimal | None) -> float | None:
    if value is None:
        return None
    return float(value.quantize(Decimal("0.01")))


def group_indian(digits: str) -> str:
    """Group an unsigned integer string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(value: Decimal | int | float | None, symbol: bool = True) -> str:
    if value is None:
        return "n/a"
    rounded = as_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    text = group_indian(str(abs(int(rounded))))
    return f"{sign}{RUPEE if symbol else ''}{text}"
