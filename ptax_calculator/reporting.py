from __future__ import annotations

from typing import Any

from ptax_calculator.breakdown import Breakdown, describe_salary_range
from ptax_calculator.engine import Calculated, JurisdictionSummary, NoApplicablePTax, Outcome
from ptax_calculator.models import Slab, State
from ptax_calculator.money import as_float, format_inr
from ptax_calculator.rules import month_name

SCHEMA_VERSION = "1.0.0"


def breakdown_to_json(breakdown: Breakdown) -> dict[str, Any]:
    return {
        "monthly_amount": as_float(breakdown.monthly_amount),
        "yearly_amount": as_float(breakdown.yearly_amount),
        "collection_mode": breakdown.collection_mode.value if breakdown.collection_mode else None,
        "salary_range": breakdown.salary_range,
        "tax_session": breakdown.tax_session,
        "collection_months": breakdown.collection_months,
        "message": breakdown.message,
        "installments": [
            {
                "period": item.period,
                "amount": as_float(item.amount),
                "frequency": item.frequency,
                "month": item.month,
                "is_override": item.is_override,
            }
            for item in breakdown.installments
        ],
    }


def outcome_to_json(outcome: Outcome) -> dict[str, Any]:
    calculated = isinstance(outcome, Calculated)
    return {
        "schema_version": SCHEMA_VERSION,
        "status": "CALCULATED" if calculated else "NO_APPLICABLE_PTAX",
        "reason": None if calculated else outcome.reason.value,
        "state": {
            "state_id": outcome.state_id,
            "state_name": outcome.state_name,
            "state_code": outcome.state_code,
        },
        "salary": as_float(outcome.salary),
        "gender": outcome.gender.value,
        "date": outcome.on_date.isoformat(),
        "monthly_amount": as_float(outcome.monthly_amount),
        "base_amount": as_float(outcome.base_amount) if calculated else None,
        "yearly_amount": as_float(outcome.yearly_amount),
        "collection_mode": outcome.collection_mode.value if outcome.collection_mode else None,
        "message": outcome.message,
        "breakdown": breakdown_to_json(outcome.breakdown),
    }


def outcome_to_markdown(outcome: Outcome) -> str:
    lines: list[str] = []

    lines.append(f"# Professional Tax: {outcome.state_name} ({outcome.state_code})")
    lines.append("")
    lines.append(f"- Salary: {format_inr(outcome.salary)} per month")
    lines.append(f"- Gender: {outcome.gender.value}")
    lines.append(f"- Evaluated on: {outcome.on_date.isoformat()}")

    if isinstance(outcome, NoApplicablePTax):
        lines.append(f"- Result: {outcome.message}")
        lines.append("")
        return "\n".join(lines)

    breakdown = outcome.breakdown
    lines.append(f"- PTax for {month_name(outcome.on_date.month)}: {format_inr(outcome.monthly_amount)}")
    lines.append(f"- Yearly PTax: {format_inr(outcome.yearly_amount)}")
    lines.append(f"- Collection Mode: {outcome.collection_mode.label}")
    lines.append("")

    lines.append("## Applicable Slab")
    lines.append(f"- Salary Range: {breakdown.salary_range}")
    lines.append(f"- Tax Session: {breakdown.tax_session}")
    if breakdown.collection_months:
        lines.append(f"- Collection Months: {breakdown.collection_months}")
    lines.append("")

    if breakdown.installments:
        lines.append("## Payment Schedule")
        lines.append("| Period | Amount | Frequency |")
        lines.append("| :--- | :--- | :--- |")
        for item in breakdown.installments:
            marker = " (override)" if item.is_override else ""
            lines.append(f"| {item.period} | {format_inr(item.amount)}{marker} | {item.frequency} |")
        lines.append("")

    return "\n".join(lines)


def summary_rows(summaries: list[JurisdictionSummary]) -> list[list[str]]:
    return [
        [
            row.state_name,
            row.state_code,
            format_inr(row.monthly_amount),
            format_inr(row.yearly_amount),
            row.collection_mode.label,
        ]
        for row in summaries
    ]


def state_rows(states: list[State]) -> list[list[str]]:
    return [[str(state.state_id), state.state_name, state.state_code, "Yes" if state.is_ut else "No"] for state in states]


def slab_rows(slabs: list[Slab]) -> list[list[str]]:
    rows = []
    for slab in slabs:
        rows.append(
            [
                describe_salary_range(slab),
                format_inr(slab.base_amount),
                slab.override_raw or "",
                slab.collection_mode.label,
                slab.collection_month_spec or "",
                slab.gender.value,
            ]
        )
    return rows

