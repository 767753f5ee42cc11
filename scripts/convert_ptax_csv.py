#!/usr/bin/env python3
"""
Convert the raw state and PTax slab CSV exports into the JSON dataset files
read by ptax_calculator.dataset.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from ptax_calculator.dataset import (
    SLAB_CSV_COLUMNS,
    SLABS_FILENAME,
    STATE_CSV_COLUMNS,
    STATES_FILENAME,
    read_csv_records,
    validate_records,
)
from ptax_calculator.exceptions import DatasetError
from ptax_calculator.models import Slab, State

PACKAGE_DATA = Path(__file__).parent.parent / "ptax_calculator" / "data"


def convert_states(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    converted = []
    for record in records:
        converted.append(
            {
                "stateId": record["stateId"],
                "stateName": record["stateName"],
                "stateCode": record["stateCode"],
                "countryId": record["countryId"],
                "govId": record["govId"],
                "isUT": record["isUT"] == 1,
                "isActive": record["isActive"] == 1,
            }
        )
    return converted


def convert_slabs(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    converted = []
    for record in records:
        row = dict(record)
        # Bare numeric overrides are stored as numbers, month#amount lists as text.
        override = row.get("overrideAmt")
        if isinstance(override, str):
            try:
                row["overrideAmt"] = int(override)
            except ValueError:
                pass
        converted.append(row)
    return converted


def write_json(path: Path, payload: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def convert(states_csv: Path, slabs_csv: Path, out_dir: Path) -> tuple[int, int]:
    states = convert_states(read_csv_records(states_csv, STATE_CSV_COLUMNS))
    slabs = convert_slabs(read_csv_records(slabs_csv, SLAB_CSV_COLUMNS))

    states_out = out_dir / STATES_FILENAME
    slabs_out = out_dir / SLABS_FILENAME
    validate_records(states, "states", states_out)
    validate_records(slabs, "slabs", slabs_out)

    # Typed conversion rejects records the engine could not use.
    for record in states:
        State.from_record(record)
    for record in slabs:
        Slab.from_record(record)

    write_json(states_out, states)
    write_json(slabs_out, slabs)
    return len(states), len(slabs)


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert state and PTax slab CSV exports to JSON.")
    parser.add_argument("--states-csv", type=Path, default=PACKAGE_DATA / "raw" / "states.csv")
    parser.add_argument("--slabs-csv", type=Path, default=PACKAGE_DATA / "raw" / "ptax-slabs.csv")
    parser.add_argument("--out-dir", type=Path, default=PACKAGE_DATA)
    args = parser.parse_args()

    try:
        state_count, slab_count = convert(args.states_csv, args.slabs_csv, args.out_dir)
    except DatasetError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"Converted {state_count} states")
    print(f"Converted {slab_count} PTax slabs")


if __name__ == "__main__":
    main()
