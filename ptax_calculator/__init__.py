from ptax_calculator.amounts import resolve_amount, yearly_amount
from ptax_calculator.breakdown import Breakdown, Installment, build_breakdown
from ptax_calculator.dataset import load_reference_data
from ptax_calculator.engine import (
    Calculated,
    JurisdictionSummary,
    NoApplicablePTax,
    NoApplicableReason,
    PTaxCalculator,
    PTaxEngine,
)
from ptax_calculator.exceptions import (
    DatasetError,
    NotInitializedError,
    PTaxError,
    UnknownStateError,
)
from ptax_calculator.models import CollectionMode, Gender, Slab, State
from ptax_calculator.money import format_inr
from ptax_calculator.selection import match_salary_band, select_slabs
from ptax_calculator.session import order_session_months

__version__ = "1.0.0"

__all__ = [
    "Breakdown",
    "Calculated",
    "CollectionMode",
    "DatasetError",
    "Gender",
    "Installment",
    "JurisdictionSummary",
    "NoApplicablePTax",
    "NoApplicableReason",
    "NotInitializedError",
    "PTaxCalculator",
    "PTaxEngine",
    "PTaxError",
    "Slab",
    "State",
    "UnknownStateError",
    "build_breakdown",
    "format_inr",
    "load_reference_data",
    "match_salary_band",
    "order_session_months",
    "resolve_amount",
    "select_slabs",
    "yearly_amount",
]
