"""
Reference data loading.

State and slab tables are read from JSON (camelCase records, as produced by
scripts/convert_ptax_csv.py) or directly from the CSV exports, checked against
the bundled JSON schemas, and converted into typed records.
"""

from __future__ import annotations

import csv
import json
import logging
import os
from pathlib import Path
from typing import Any

from ptax_calculator.exceptions import DatasetError
from ptax_calculator.models import Slab, State
from ptax_calculator.utils.contracts import ContractError, validate_output

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "PTAX_DATA_DIR"
BUNDLED_DATA_DIR = Path(__file__).parent / "data"
STATES_FILENAME = "states.json"
SLABS_FILENAME = "ptax-slabs.json"

STATE_CSV_COLUMNS = {
    "StateId": "stateId",
    "StateName": "stateName",
    "StateCode": "stateCode",
    "CountryId": "countryId",
    "GovId": "govId",
    "IsUT": "isUT",
    "IsActive": "isActive",
}
SLAB_CSV_COLUMNS = {
    "STATE_GOV_ID": "stateGovId",
    "State Name": "stateName",
    "Amt From (Per Month)": "amtFrom",
    "Amt To (Per Month)": "amtTo",
    "Monthly P Tax Amt": "monthlyPTaxAmt",
    "Override Amt": "overrideAmt",
    "Collection Mode (Yearly/HalfYearly/Quaterly/Monthly)": "collectionMode",
    "PTax Collection Month": "ptaxCollectionMonth",
    "Gender": "gender",
    "P Tax Session From (Month)": "ptaxSessionFromMonth",
    "P Tax Session To (Month)": "ptaxSessionToMonth",
    "P Tax From Year": "ptaxFromYear",
    "P Tax To Year": "ptaxToYear",
}
# Columns whose text must survive as-is even when it looks numeric.
TEXT_COLUMNS = {"overrideAmt", "ptaxCollectionMonth", "stateName", "stateCode"}


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override).expanduser() if override else BUNDLED_DATA_DIR


def coerce_cell(value: str | None) -> Any:
    """Convert a CSV cell: blank -> None, integers and decimals -> numbers, otherwise text."""
    if value is None:
        return None
    text = value.strip()
    if text.startswith('"') and text.endswith('"') and len(text) >= 2:
        text = text[1:-1].strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def read_csv_records(path: Path, columns: dict[str, str]) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    with path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        missing = [header for header in columns if header not in (reader.fieldnames or [])]
        if missing:
            raise DatasetError(f"{path}: missing CSV columns {missing}")
        for row in reader:
            if None in row:
                raise DatasetError(
                    f"{path}:{reader.line_num}: row has more fields than the header "
                    "(quote values that contain commas, e.g. \"H:2,8\")"
                )
            record: dict[str, Any] = {}
            for header, key in columns.items():
                raw = row.get(header)
                if key in TEXT_COLUMNS:
                    text = (raw or "").strip()
                    record[key] = text or None
                else:
                    record[key] = coerce_cell(raw)
            records.append(record)
    return records


def read_records(path: Path, csv_columns: dict[str, str]) -> list[dict[str, Any]]:
    if not path.exists():
        raise DatasetError(f"Dataset file not found: {path}")

    if path.suffix.lower() == ".csv":
        return read_csv_records(path, csv_columns)

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as e:
        raise DatasetError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(data, list):
        raise DatasetError(f"{path}: expected a JSON array of records")
    return data


def validate_records(records: list[dict[str, Any]], schema_name: str, path: Path) -> None:
    try:
        validate_output(records, schema_name, mode="STRICT")
    except ContractError as e:
        raise DatasetError(f"{path}: {e}") from e


def load_states(path: Path) -> list[State]:
    records = read_records(path, STATE_CSV_COLUMNS)
    validate_records(records, "states", path)
    return [State.from_record(record) for record in records]


def load_slabs(path: Path) -> list[Slab]:
    records = read_records(path, SLAB_CSV_COLUMNS)
    validate_records(records, "slabs", path)
    return [Slab.from_record(record) for record in records]


def load_reference_data(
    states_path: Path | None = None,
    slabs_path: Path | None = None,
) -> tuple[list[State], list[Slab]]:
    """
    Load the state and slab tables.

    Paths default to PTAX_DATA_DIR (or the bundled data directory) with the
    standard file names.
    """
    base = data_dir()
    states_path = states_path or base / STATES_FILENAME
    slabs_path = slabs_path or base / SLABS_FILENAME

    states = load_states(states_path)
    slabs = load_slabs(slabs_path)
    logger.info(f"Loaded {len(states)} states from {states_path} and {len(slabs)} PTax slabs from {slabs_path}")
    return states, slabs
