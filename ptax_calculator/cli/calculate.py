"""
CLI Entry Point: ptax-calc

Professional tax lookups against the state and slab reference tables.
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from ptax_calculator.dataset import load_reference_data
from ptax_calculator.engine import NoApplicablePTax, PTaxEngine
from ptax_calculator.exceptions import DatasetError, UnknownStateError
from ptax_calculator.models import Gender
from ptax_calculator.reporting import outcome_to_json, outcome_to_markdown, slab_rows, state_rows, summary_rows
from ptax_calculator.utils import console
from ptax_calculator.utils.contracts import validate_output

MAX_SALARY = Decimal("999999999")


def salary_arg(value: str) -> Decimal:
    try:
        salary = Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid salary: {value!r}")
    if not salary.is_finite() or salary <= 0:
        raise argparse.ArgumentTypeError("salary must be a positive amount")
    if salary > MAX_SALARY:
        raise argparse.ArgumentTypeError("salary amount seems too high")
    return salary


def date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calculate Indian professional tax (PTax) by state.")
    parser.add_argument("--states", type=Path, default=None, help="State table (JSON or CSV).")
    parser.add_argument("--slabs", type=Path, default=None, help="PTax slab table (JSON or CSV).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calc = subparsers.add_parser("calc", help="Calculate PTax for a state and monthly salary.")
    calc.add_argument("state_id", help="State ID from the state table.")
    calc.add_argument("salary", type=salary_arg, help="Monthly salary.")
    calc.add_argument("--gender", choices=[g.value for g in Gender], default=Gender.ALL.value)
    calc.add_argument("--date", type=date_arg, default=None, help="Evaluation date (default: today).")
    calc.add_argument("--json", action="store_true", help="Output machine-readable JSON.")

    subparsers.add_parser("states", help="List states that levy PTax.")

    slabs = subparsers.add_parser("slabs", help="List the PTax slabs of a state.")
    slabs.add_argument("state_id", help="State ID from the state table.")

    compare = subparsers.add_parser("compare", help="Compare PTax for a salary across all states.")
    compare.add_argument("salary", type=salary_arg, help="Monthly salary.")
    compare.add_argument("--gender", choices=[g.value for g in Gender], default=Gender.ALL.value)
    compare.add_argument("--date", type=date_arg, default=None, help="Evaluation date (default: today).")
    compare.add_argument("--json", action="store_true", help="Output machine-readable JSON.")

    return parser


def run_calc(engine: PTaxEngine, args: argparse.Namespace) -> None:
    outcome = engine.compute_tax(args.state_id, args.salary, args.gender, args.date)
    if args.json:
        payload = outcome_to_json(outcome)
        validate_output(payload, "calculation_output", mode="REVIEW")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    console.print_markdown(outcome_to_markdown(outcome))
    if isinstance(outcome, NoApplicablePTax):
        console.print_warning(outcome.message)


def run_states(engine: PTaxEngine) -> None:
    states = engine.list_jurisdictions_with_tax()
    console.print_table("States with PTax", ["ID", "State", "Code", "UT"], state_rows(states))


def run_slabs(engine: PTaxEngine, args: argparse.Namespace) -> None:
    state = engine.require_state(args.state_id)
    slabs = engine.list_slabs_for(args.state_id)
    console.print_table(
        f"PTax Slabs: {state.state_name} ({state.state_code})",
        ["Salary Range", "Base", "Override", "Mode", "Months", "Gender"],
        slab_rows(slabs),
    )


def run_compare(engine: PTaxEngine, args: argparse.Namespace) -> None:
    summaries = engine.summarize_across_jurisdictions(args.salary, args.gender, args.date)
    if args.json:
        payload = [
            {
                "state_id": row.state_id,
                "state_name": row.state_name,
                "state_code": row.state_code,
                "monthly_amount": float(row.monthly_amount),
                "yearly_amount": float(row.yearly_amount),
                "collection_mode": row.collection_mode.value,
            }
            for row in summaries
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    console.print_table(
        "PTax Across States",
        ["State", "Code", "This Month", "Yearly", "Mode"],
        summary_rows(summaries),
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        states, slabs = load_reference_data(args.states, args.slabs)
        engine = PTaxEngine(states, slabs)
    except DatasetError as e:
        console.print_error(f"Could not load reference data: {e}", exit_code=1)
        return

    try:
        if args.command == "calc":
            run_calc(engine, args)
        elif args.command == "states":
            run_states(engine)
        elif args.command == "slabs":
            run_slabs(engine, args)
        else:
            run_compare(engine, args)
    except UnknownStateError as e:
        console.print_error(str(e), exit_code=2)


if __name__ == "__main__":
    main()
