from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from ptax_calculator.exceptions import DatasetError
from ptax_calculator.rules import (
    is_blank,
    parse_collection_months,
    parse_decimal,
    parse_month,
    parse_override,
)

DEFAULT_SESSION_FROM_MONTH = 4
DEFAULT_SESSION_TO_MONTH = 3


class CollectionMode(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    HALF_YEARLY = "HALF YEARLY"
    YEARLY = "YEARLY"

    @classmethod
    def parse(cls, value: Any) -> CollectionMode:
        if isinstance(value, cls):
            return value
        key = str(value or "").upper()
        for char in (" ", "_", "-"):
            key = key.replace(char, "")
        mode = _MODE_ALIASES.get(key)
        if mode is None:
            raise ValueError(f"Unknown collection mode: {value!r}")
        return mode

    @property
    def letter(self) -> str:
        return _MODE_LETTERS[self]

    @property
    def label(self) -> str:
        return _MODE_LABELS[self]

    @property
    def nominal_count(self) -> int:
        """Collections per year when the slab does not list its months."""
        return _MODE_COUNTS[self]


_MODE_ALIASES = {
    "MONTHLY": CollectionMode.MONTHLY,
    "QUARTERLY": CollectionMode.QUARTERLY,
    "QUATERLY": CollectionMode.QUARTERLY,
    "HALFYEARLY": CollectionMode.HALF_YEARLY,
    "YEARLY": CollectionMode.YEARLY,
    "ANNUAL": CollectionMode.YEARLY,
}
_MODE_LETTERS = {
    CollectionMode.MONTHLY: "M",
    CollectionMode.QUARTERLY: "Q",
    CollectionMode.HALF_YEARLY: "H",
    CollectionMode.YEARLY: "Y",
}
_MODE_LABELS = {
    CollectionMode.MONTHLY: "Monthly",
    CollectionMode.QUARTERLY: "Quarterly",
    CollectionMode.HALF_YEARLY: "Half-Yearly",
    CollectionMode.YEARLY: "Yearly",
}
_MODE_COUNTS = {
    CollectionMode.MONTHLY: 12,
    CollectionMode.QUARTERLY: 4,
    CollectionMode.HALF_YEARLY: 2,
    CollectionMode.YEARLY: 1,
}


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    ALL = "All"

    @classmethod
    def parse(cls, value: Any) -> Gender:
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown gender: {value!r}")


@dataclass(frozen=True)
class State:
    state_id: int
    state_name: str
    state_code: str
    country_id: int | None
    gov_id: int
    is_ut: bool = False
    is_active: bool = False

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> State:
        try:
            return cls(
                state_id=_required_int(record, "stateId"),
                state_name=_required_str(record, "stateName"),
                state_code=_required_str(record, "stateCode"),
                country_id=_optional_int(record, "countryId"),
                gov_id=_required_int(record, "govId"),
                is_ut=_as_bool(record.get("isUT")),
                is_active=_as_bool(record.get("isActive")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DatasetError(f"Invalid state record {record!r}: {e}") from e


@dataclass(frozen=True)
class Slab:
    state_gov_id: int
    amt_from: Decimal | None
    amt_to: Decimal | None
    base_amount: Decimal
    collection_mode: CollectionMode
    gender: Gender
    session_from_month: int | None = None
    session_to_month: int | None = None
    from_year: int | None = None
    to_year: int | None = None
    state_name: str | None = None
    override_flat: Decimal | None = None
    override_by_month: Mapping[int, Decimal] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    collection_months: frozenset[int] | None = None
    override_raw: str | None = None
    collection_month_spec: str | None = None

    @property
    def effective_from(self) -> Decimal:
        return self.amt_from if self.amt_from is not None else Decimal("0")

    @property
    def effective_to(self) -> Decimal:
        return self.amt_to if self.amt_to is not None else Decimal("Infinity")

    @property
    def has_override(self) -> bool:
        return self.override_flat is not None or bool(self.override_by_month)

    def covers_salary(self, salary: Decimal) -> bool:
        return self.effective_from <= salary <= self.effective_to

    def application_date(self) -> date | None:
        if self.from_year is None or self.session_from_month is None:
            return None
        return date(self.from_year, self.session_from_month, 1)

    def expiry_date(self) -> date | None:
        if self.to_year is None or self.session_to_month is None:
            return None
        return date(self.to_year, self.session_to_month, 1)

    def is_valid_on(self, on_date: date) -> bool:
        application = self.application_date()
        expiry = self.expiry_date()
        if application is not None and on_date < application:
            return False
        if expiry is not None and on_date > expiry:
            return False
        return True

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Slab:
        """
        Build a slab from a camelCase dataset record.

        Required: stateGovId, monthlyPTaxAmt, collectionMode, gender.
        Rule strings are parsed here so calculations only perform lookups.
        """
        try:
            state_gov_id = _required_int(record, "stateGovId")
            amt_from = _optional_decimal(record, "amtFrom")
            amt_to = _optional_decimal(record, "amtTo")
            base_amount = parse_decimal(record.get("monthlyPTaxAmt"))
            if base_amount is None:
                raise ValueError("monthlyPTaxAmt is required")
            mode = CollectionMode.parse(record.get("collectionMode"))
            gender = Gender.parse(record.get("gender"))
        except (KeyError, TypeError, ValueError) as e:
            raise DatasetError(f"Invalid slab record {record!r}: {e}") from e

        if amt_from is not None and amt_to is not None and amt_from > amt_to:
            raise DatasetError(f"Invalid slab record {record!r}: amtFrom {amt_from} exceeds amtTo {amt_to}")

        state_name = record.get("stateName")
        context = f" (state gov id {state_gov_id}, {state_name or 'unnamed'})"
        override_raw = record.get("overrideAmt")
        override_flat, override_by_month = parse_override(override_raw, context=context)
        spec_raw = record.get("ptaxCollectionMonth")
        collection_months = parse_collection_months(spec_raw, mode_letter=mode.letter, context=context)

        return cls(
            state_gov_id=state_gov_id,
            amt_from=amt_from,
            amt_to=amt_to,
            base_amount=base_amount,
            collection_mode=mode,
            gender=gender,
            session_from_month=parse_month(record.get("ptaxSessionFromMonth")),
            session_to_month=parse_month(record.get("ptaxSessionToMonth")),
            from_year=_optional_int(record, "ptaxFromYear"),
            to_year=_optional_int(record, "ptaxToYear"),
            state_name=str(state_name) if state_name is not None else None,
            override_flat=override_flat,
            override_by_month=MappingProxyType(override_by_month),
            collection_months=collection_months,
            override_raw=None if is_blank(override_raw) else str(override_raw).strip(),
            collection_month_spec=None if is_blank(spec_raw) else str(spec_raw).strip(),
        )


def _required_int(record: dict[str, Any], key: str) -> int:
    value = _optional_int(record, key)
    if value is None:
        raise ValueError(f"{key} is required")
    return value


def _optional_int(record: dict[str, Any], key: str) -> int | None:
    value = record.get(key)
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    return int(str(value).strip())


def _required_str(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    if is_blank(value):
        raise ValueError(f"{key} is required")
    return str(value).strip()


def _optional_decimal(record: dict[str, Any], key: str) -> Decimal | None:
    value = record.get(key)
    if is_blank(value):
        return None
    parsed = parse_decimal(value)
    if parsed is None:
        raise ValueError(f"{key} must be numeric, got {value!r}")
    return parsed


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)
