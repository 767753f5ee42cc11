"""
PTax calculation engine.

`PTaxEngine` is built from the state and slab tables in one step and never
changes afterwards. `PTaxCalculator` wraps it for callers that create the
calculator first and load reference data later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from ptax_calculator.amounts import resolve_amount, yearly_amount
from ptax_calculator.breakdown import Breakdown, build_breakdown, empty_breakdown
from ptax_calculator.exceptions import DatasetError, NotInitializedError, UnknownStateError
from ptax_calculator.models import CollectionMode, Gender, Slab, State
from ptax_calculator.money import as_decimal
from ptax_calculator.selection import match_salary_band, select_slabs

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CALCULATED_MESSAGE = "PTax calculated successfully"
NO_SLABS_MESSAGE = "No PTax applicable for this state"
OUT_OF_RANGE_MESSAGE = "No PTax applicable for this salary range"


class NoApplicableReason(str, Enum):
    NO_SLABS = "NO_SLABS"
    SALARY_OUT_OF_RANGE = "SALARY_OUT_OF_RANGE"


@dataclass(frozen=True)
class Calculated:
    state: State
    salary: Decimal
    gender: Gender
    on_date: date
    monthly_amount: Decimal
    base_amount: Decimal
    yearly_amount: Decimal
    collection_mode: CollectionMode
    slab: Slab
    breakdown: Breakdown
    message: str = CALCULATED_MESSAGE

    @property
    def state_id(self) -> int:
        return self.state.state_id

    @property
    def state_name(self) -> str:
        return self.state.state_name

    @property
    def state_code(self) -> str:
        return self.state.state_code


@dataclass(frozen=True)
class NoApplicablePTax:
    state: State
    salary: Decimal
    gender: Gender
    on_date: date
    reason: NoApplicableReason
    message: str
    breakdown: Breakdown
    monthly_amount: Decimal = ZERO
    yearly_amount: Decimal = ZERO
    collection_mode: CollectionMode | None = None

    @property
    def state_id(self) -> int:
        return self.state.state_id

    @property
    def state_name(self) -> str:
        return self.state.state_name

    @property
    def state_code(self) -> str:
        return self.state.state_code


Outcome = Calculated | NoApplicablePTax


@dataclass(frozen=True)
class JurisdictionSummary:
    state_id: int
    state_name: str
    state_code: str
    monthly_amount: Decimal
    yearly_amount: Decimal
    collection_mode: CollectionMode


def coerce_salary(salary: Any) -> Decimal:
    try:
        value = as_decimal(salary)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Salary must be numeric, got {salary!r}") from e
    if not value.is_finite():
        raise ValueError(f"Salary must be finite, got {salary!r}")
    return value


def coerce_state_id(state_id: Any) -> int | None:
    """Integer id from an int, an integral float or a numeric string; None otherwise."""
    if isinstance(state_id, bool):
        return None
    if isinstance(state_id, int):
        return state_id
    try:
        value = Decimal(str(state_id).strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value != value.to_integral_value():
        return None
    return int(value)


def coerce_date(on_date: date | None) -> date:
    if on_date is None:
        return date.today()
    if isinstance(on_date, datetime):
        return on_date.date()
    return on_date


class PTaxEngine:
    def __init__(self, states: Iterable[State], slabs: Iterable[Slab]) -> None:
        self._states: tuple[State, ...] = tuple(states)
        self._slabs: tuple[Slab, ...] = tuple(slabs)
        self._states_by_id: dict[int, State] = {}
        for state in self._states:
            if state.state_id in self._states_by_id:
                raise DatasetError(f"Duplicate state id {state.state_id} in state table.")
            self._states_by_id[state.state_id] = state

    @classmethod
    def from_records(
        cls,
        state_records: Iterable[dict[str, Any]],
        slab_records: Iterable[dict[str, Any]],
    ) -> PTaxEngine:
        states = [State.from_record(record) for record in state_records]
        slabs = [Slab.from_record(record) for record in slab_records]
        logger.info(f"Loaded {len(states)} states and {len(slabs)} PTax slabs")
        return cls(states, slabs)

    @property
    def states(self) -> tuple[State, ...]:
        return self._states

    @property
    def slabs(self) -> tuple[Slab, ...]:
        return self._slabs

    def get_state(self, state_id: Any) -> State | None:
        key = coerce_state_id(state_id)
        if key is None:
            return None
        return self._states_by_id.get(key)

    def require_state(self, state_id: Any) -> State:
        state = self.get_state(state_id)
        if state is None:
            raise UnknownStateError(state_id)
        return state

    def list_states(self) -> list[State]:
        # Historical listing keeps only records whose isActive flag is falsy.
        # This looks inverted but is kept as-is for compatibility with existing data.
        return [state for state in self._states if not state.is_active]

    def list_slabs_for(self, state_id: Any) -> list[Slab]:
        state = self.require_state(state_id)
        return [slab for slab in self._slabs if slab.state_gov_id == state.gov_id]

    def list_jurisdictions_with_tax(self) -> list[State]:
        gov_ids = {slab.state_gov_id for slab in self._slabs}
        return sorted(
            (state for state in self._states if state.gov_id in gov_ids),
            key=lambda state: state.state_name.casefold(),
        )

    def collection_modes(self) -> list[CollectionMode]:
        modes: list[CollectionMode] = []
        for slab in self._slabs:
            if slab.collection_mode not in modes:
                modes.append(slab.collection_mode)
        return modes

    def select_slabs(self, state_id: Any, gender: Gender | str, on_date: date) -> list[Slab]:
        state = self.require_state(state_id)
        on_date = coerce_date(on_date)
        selected = select_slabs(self._slabs, state.gov_id, Gender.parse(gender), on_date)
        logger.debug(f"{len(selected)} slabs apply to {state.state_name} on {on_date.isoformat()}")
        return selected

    def compute_tax(
        self,
        state_id: Any,
        salary: Any,
        gender: Gender | str = Gender.ALL,
        on_date: date | None = None,
    ) -> Outcome:
        state = self.require_state(state_id)
        salary_value = coerce_salary(salary)
        gender_value = Gender.parse(gender)
        on_date = coerce_date(on_date)

        slabs = select_slabs(self._slabs, state.gov_id, gender_value, on_date)
        if not slabs:
            return NoApplicablePTax(
                state=state,
                salary=salary_value,
                gender=gender_value,
                on_date=on_date,
                reason=NoApplicableReason.NO_SLABS,
                message=NO_SLABS_MESSAGE,
                breakdown=empty_breakdown(NO_SLABS_MESSAGE),
            )

        slab = match_salary_band(slabs, salary_value)
        if slab is None:
            return NoApplicablePTax(
                state=state,
                salary=salary_value,
                gender=gender_value,
                on_date=on_date,
                reason=NoApplicableReason.SALARY_OUT_OF_RANGE,
                message=OUT_OF_RANGE_MESSAGE,
                breakdown=empty_breakdown("Salary outside any slab"),
            )

        return Calculated(
            state=state,
            salary=salary_value,
            gender=gender_value,
            on_date=on_date,
            monthly_amount=resolve_amount(slab, on_date.month),
            base_amount=slab.base_amount,
            yearly_amount=yearly_amount(slab, on_date.year),
            collection_mode=slab.collection_mode,
            slab=slab,
            breakdown=build_breakdown(slab, on_date),
        )

    def summarize_across_jurisdictions(
        self,
        salary: Any,
        gender: Gender | str = Gender.ALL,
        on_date: date | None = None,
    ) -> list[JurisdictionSummary]:
        on_date = coerce_date(on_date)
        summary: list[JurisdictionSummary] = []
        for state in self._states:
            outcome = self.compute_tax(state.state_id, salary, gender, on_date)
            if not isinstance(outcome, Calculated):
                continue
            summary.append(
                JurisdictionSummary(
                    state_id=state.state_id,
                    state_name=state.state_name,
                    state_code=state.state_code,
                    monthly_amount=outcome.monthly_amount,
                    yearly_amount=outcome.yearly_amount,
                    collection_mode=outcome.collection_mode,
                )
            )
        return sorted(summary, key=lambda row: row.monthly_amount)


DatasetLoader = Callable[[], tuple[Sequence[State], Sequence[Slab]]]


class PTaxCalculator:
    """
    Load-then-use facade over PTaxEngine.

    Calculations requested before load() raise NotInitializedError.
    """

    def __init__(self, loader: DatasetLoader | None = None) -> None:
        self._loader = loader
        self._engine: PTaxEngine | None = None

    @property
    def is_loaded(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> PTaxEngine:
        if self._engine is None:
            raise NotInitializedError()
        return self._engine

    def load(self) -> PTaxEngine:
        if self._loader is None:
            from ptax_calculator.dataset import load_reference_data

            states, slabs = load_reference_data()
        else:
            states, slabs = self._loader()
        self._engine = PTaxEngine(states, slabs)
        logger.info("PTax calculator initialized successfully")
        return self._engine

    def compute_tax(
        self,
        state_id: Any,
        salary: Any,
        gender: Gender | str = Gender.ALL,
        on_date: date | None = None,
    ) -> Outcome:
        return self.engine.compute_tax(state_id, salary, gender, on_date)

    def list_slabs_for(self, state_id: Any) -> list[Slab]:
        return self.engine.list_slabs_for(state_id)

    def list_jurisdictions_with_tax(self) -> list[State]:
        return self.engine.list_jurisdictions_with_tax()

    def summarize_across_jurisdictions(
        self,
        salary: Any,
        gender: Gender | str = Gender.ALL,
        on_date: date | None = None,
    ) -> list[JurisdictionSummary]:
        return self.engine.summarize_across_jurisdictions(salary, gender, on_date)
