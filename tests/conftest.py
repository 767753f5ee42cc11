import pytest
from datetime import date
from typing import Any, Callable

from ptax_calculator.engine import PTaxEngine
from ptax_calculator.models import Slab, State

EVALUATION_DATE = date(2025, 6, 15)

BASE_SLAB_RECORD: dict[str, Any] = {
    "stateGovId": 18,
    "stateName": "Assam",
    "amtFrom": 15001,
    "amtTo": 25000,
    "monthlyPTaxAmt": 180,
    "overrideAmt": None,
    "collectionMode": "MONTHLY",
    "ptaxCollectionMonth": None,
    "gender": "All",
    "ptaxSessionFromMonth": "APRIL",
    "ptaxSessionToMonth": "MARCH",
    "ptaxFromYear": 2025,
    "ptaxToYear": 2026,
}


def slab_record(**overrides: Any) -> dict[str, Any]:
    record = dict(BASE_SLAB_RECORD)
    record.update(overrides)
    return record


def state_record(state_id: int, name: str, code: str, gov_id: int, is_active: bool = False) -> dict[str, Any]:
    return {
        "stateId": state_id,
        "stateName": name,
        "stateCode": code,
        "countryId": 1,
        "govId": gov_id,
        "isUT": False,
        "isActive": is_active,
    }


STATE_RECORDS = [
    state_record(18, "Assam", "AS", 18),
    state_record(10, "Bihar", "BR", 10),
    state_record(27, "Maharashtra", "MH", 27),
    state_record(28, "Karnataka", "KA", 29),
    state_record(6, "Haryana", "HR", 6, is_active=True),
]

SLAB_RECORDS = [
    slab_record(amtFrom=10001, amtTo=15000, monthlyPTaxAmt=150),
    slab_record(amtFrom=15001, amtTo=25000, monthlyPTaxAmt=180),
    slab_record(amtFrom=25001, amtTo=None, monthlyPTaxAmt=208),
    slab_record(
        stateGovId=10,
        stateName="BIHAR",
        amtFrom=300001,
        amtTo=500000,
        monthlyPTaxAmt=1000,
        collectionMode="YEARLY",
        ptaxCollectionMonth="Y:10",
    ),
    slab_record(
        stateGovId=10,
        stateName="BIHAR",
        amtFrom=500001,
        amtTo=1000000,
        monthlyPTaxAmt=2000,
        collectionMode="YEARLY",
        ptaxCollectionMonth="Y:10",
    ),
    slab_record(stateGovId=27, stateName="Maharashtra", amtFrom=7501, amtTo=10000, monthlyPTaxAmt=175, gender="Male"),
    slab_record(
        stateGovId=27,
        stateName="Maharashtra",
        amtFrom=10001,
        amtTo=None,
        monthlyPTaxAmt=200,
        overrideAmt="2#300",
        gender="Male",
    ),
    slab_record(
        stateGovId=27,
        stateName="Maharashtra",
        amtFrom=25001,
        amtTo=None,
        monthlyPTaxAmt=200,
        overrideAmt="2#300",
        gender="Female",
    ),
    slab_record(stateGovId=29, stateName="KARNATAKA", amtFrom=25000, amtTo=None, monthlyPTaxAmt=200, overrideAmt="2#300"),
]


@pytest.fixture
def make_slab() -> Callable[..., Slab]:
    """Returns a factory building a Slab from the base Assam record plus overrides."""

    def _make(**overrides: Any) -> Slab:
        return Slab.from_record(slab_record(**overrides))

    return _make


@pytest.fixture
def states() -> list[State]:
    return [State.from_record(record) for record in STATE_RECORDS]


@pytest.fixture
def slabs() -> list[Slab]:
    return [Slab.from_record(record) for record in SLAB_RECORDS]


@pytest.fixture
def engine() -> PTaxEngine:
    return PTaxEngine.from_records(STATE_RECORDS, SLAB_RECORDS)
