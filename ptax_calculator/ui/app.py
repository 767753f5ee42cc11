#!/usr/bin/env python3

from __future__ import annotations

import json
from datetime import date
from typing import Any

import streamlit as st

from ptax_calculator.dataset import load_reference_data
from ptax_calculator.engine import Calculated, Outcome, PTaxEngine
from ptax_calculator.models import Gender
from ptax_calculator.money import format_inr
from ptax_calculator.reporting import outcome_to_json, outcome_to_markdown, summary_rows

MAX_SALARY = 999_999_999


@st.cache_resource
def get_engine() -> PTaxEngine:
    states, slabs = load_reference_data()
    return PTaxEngine(states, slabs)


def installment_table(outcome: Outcome) -> list[dict[str, Any]]:
    return [
        {
            "Period": item.period,
            "Amount": format_inr(item.amount),
            "Frequency": item.frequency,
            "Override": "Yes" if item.is_override else "",
        }
        for item in outcome.breakdown.installments
    ]


def validate_form(salary: float) -> str | None:
    if salary <= 0:
        return "Please enter a valid salary amount."
    if salary > MAX_SALARY:
        return "Salary amount seems too high. Please enter a reasonable amount."
    return None


def show_outcome(outcome: Outcome) -> None:
    if not isinstance(outcome, Calculated):
        st.warning(outcome.message)
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("PTax This Month", format_inr(outcome.monthly_amount))
    c2.metric("Yearly PTax", format_inr(outcome.yearly_amount))
    c3.metric("Collection Mode", outcome.collection_mode.label)

    breakdown = outcome.breakdown
    st.markdown(f"**Applicable Slab:** {breakdown.salary_range}")
    st.markdown(f"**Tax Session:** {breakdown.tax_session}")
    if breakdown.collection_months:
        st.markdown(f"**Collection Months:** {breakdown.collection_months}")

    st.markdown("#### Payment Schedule")
    st.dataframe(installment_table(outcome), use_container_width=True)

    st.download_button(
        "Download Result JSON",
        data=json.dumps(outcome_to_json(outcome), indent=2, ensure_ascii=False),
        file_name=f"ptax_{outcome.state_code}_{outcome.on_date.isoformat()}.json",
        mime="application/json",
    )
    st.download_button(
        "Download Result Markdown",
        data=outcome_to_markdown(outcome),
        file_name=f"ptax_{outcome.state_code}_{outcome.on_date.isoformat()}.md",
        mime="text/markdown",
    )


def main() -> None:
    st.set_page_config(page_title="PTax Calculator", page_icon="₹", layout="wide")
    st.title("Professional Tax Calculator")

    engine = get_engine()
    states = engine.list_jurisdictions_with_tax()

    with st.form("ptax_form"):
        state = st.selectbox("State", states, format_func=lambda s: f"{s.state_name} ({s.state_code})")
        salary = st.number_input("Monthly Salary (₹)", min_value=0.0, step=1000.0, value=25000.0)
        gender = st.radio("Gender", [Gender.MALE.value, Gender.FEMALE.value], horizontal=True)
        on_date = st.date_input("Evaluation Date", value=date.today())
        submitted = st.form_submit_button("Calculate")

    if submitted and state is not None:
        error = validate_form(salary)
        if error:
            st.error(error)
        else:
            show_outcome(engine.compute_tax(state.state_id, str(salary), gender, on_date))

    with st.expander("Compare across states"):
        summaries = engine.summarize_across_jurisdictions(str(salary), gender, on_date)
        rows = summary_rows(summaries)
        st.dataframe(
            [dict(zip(["State", "Code", "This Month", "Yearly", "Mode"], row)) for row in rows],
            use_container_width=True,
        )


if __name__ == "__main__":
    main()
