"""Streamlit app for the stewardship planner.

The dashboard loads a snapshot from the local data store, runs the
calculation modules and renders the results.  It never changes the data
itself except through the sample-data and reset buttons.

To run the dashboard from the command line::

    streamlit run stewardship_planner/dashboard.py
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import Any, Dict

import streamlit as st

# Conditional imports to support execution both as part of a package and
# directly as a script via ``streamlit run``.
if __package__:
    from . import budget, calendar_events, cashflow, config, debts, goals
    from . import visualization as viz
    from .errors import UnpayableDebt
    from .models import DebtStrategy
    from .formatting import escape_dollar_for_markdown, format_currency, format_duration, format_percentage
    from .sample_data import load_sample_data
    from .storage import StewardshipStore
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from stewardship_planner import budget, calendar_events, cashflow, config, debts, goals  # type: ignore
    from stewardship_planner import visualization as viz  # type: ignore
    from stewardship_planner.errors import UnpayableDebt  # type: ignore
    from stewardship_planner.models import DebtStrategy  # type: ignore
    from stewardship_planner.formatting import (  # type: ignore
        escape_dollar_for_markdown,
        format_currency,
        format_duration,
        format_percentage,
    )
    from stewardship_planner.sample_data import load_sample_data  # type: ignore
    from stewardship_planner.storage import StewardshipStore  # type: ignore

SEVERITY_RENDERERS = {
    'error': 'error',
    'warning': 'warning',
    'suggestion': 'info',
}


def render_overview(snapshot: Dict[str, Any], as_of: date) -> None:
    settings = snapshot['settings']
    summary = budget.summarize(snapshot['accounts'], snapshot['bills'], settings, as_of=as_of)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income this month", format_currency(summary.total_income))
    col2.metric("Allocated", format_currency(summary.total_allocated), format_percentage(summary.allocation_percentage))
    col3.metric("Bills", format_currency(summary.total_bills))
    col4.metric("Remaining", format_currency(summary.remaining_balance))

    validation = budget.validate_balance(snapshot['accounts'], settings)
    (st.success if validation.is_valid else st.error)(validation.message)

    for rec in budget.recommend(snapshot['accounts'], summary.allocation_percentage, snapshot['bills'], settings):
        render = getattr(st, SEVERITY_RENDERERS.get(rec.severity, 'info'))
        render(f"{rec.message} {rec.action or ''}".strip())

    st.plotly_chart(viz.create_allocation_pie_chart(snapshot['accounts']), use_container_width=True)


def render_accounts(snapshot: Dict[str, Any]) -> None:
    balances = cashflow.project_balances(snapshot['accounts'], snapshot['bills'], snapshot['settings'])
    st.dataframe(cashflow.balances_frame(balances), use_container_width=True)
    st.plotly_chart(viz.create_cash_flow_chart(balances), use_container_width=True)

    st.subheader("Per-paycheck breakdown")
    settings = snapshot['settings']
    groups = budget.paycheck_breakdown(snapshot['accounts'], snapshot['bills'], settings)
    for group in groups:
        with st.expander(
            f"{group.category}: {format_currency(group.total_amount)} ({format_percentage(group.total_percentage)})"
        ):
            st.table([
                {"Item": item.name, "Amount": format_currency(item.amount), "Share": format_percentage(item.percentage)}
                for item in group.items
            ])
    remaining_pct = 100 - sum(group.total_percentage for group in groups)
    st.caption(
        f"Left after this breakdown: {format_currency(settings.paycheck_amount * remaining_pct / 100)} "
        f"({format_percentage(remaining_pct)} of one paycheck)"
    )

    st.subheader("Suggested paycheck split")
    allocations = budget.optimal_percentages(snapshot['bills'], snapshot['settings'])
    st.table([
        {"Account": allocation.account_id or "Unassigned", "Share of paycheck": format_percentage(allocation.percentage)}
        for allocation in allocations
    ])

    st.subheader("Where to trim")
    for suggestion in budget.debt_reduction_suggestions(snapshot['bills'], snapshot['settings']):
        with st.expander(f"{suggestion.category}: {format_currency(suggestion.total_amount)}"):
            st.markdown(
                f"Potential savings: {escape_dollar_for_markdown(suggestion.potential_savings)} per month"
            )
            for tip in suggestion.suggestions:
                st.markdown(f"- {tip}")


def render_debts(snapshot: Dict[str, Any]) -> None:
    extra = st.number_input("Extra monthly payment", min_value=0.0, value=0.0, step=25.0)
    try:
        comparison = debts.compare_strategies(snapshot['debts'], extra)
    except UnpayableDebt as exc:
        st.error(str(exc))
        return

    col1, col2 = st.columns(2)
    for column, result in ((col1, comparison.snowball), (col2, comparison.avalanche)):
        column.subheader(result.strategy_name)
        column.metric("Total interest", format_currency(result.total_interest))
        column.metric("Debt-free in", format_duration(result.payoff_time_months))
    st.info(comparison.message)
    st.plotly_chart(viz.create_strategy_comparison_chart(comparison), use_container_width=True)

    chosen = comparison.avalanche if comparison.recommended is DebtStrategy.AVALANCHE else comparison.snowball
    st.plotly_chart(viz.create_debt_timeline_chart(chosen), use_container_width=True)

    if extra > 0:
        st.subheader("Effect of the extra payment on each debt")
        rows = []
        for debt in snapshot['debts']:
            if not debt.is_active:
                continue
            try:
                impact = debts.extra_payment_impact(debt, extra)
            except UnpayableDebt as exc:
                st.warning(str(exc))
                continue
            rows.append({
                "Debt": debt.name,
                "Months saved": impact.months_saved,
                "Interest saved": format_currency(impact.interest_saved),
                "New payoff": format_duration(impact.new_payoff_months),
            })
        if rows:
            st.table(rows)


def render_goals(snapshot: Dict[str, Any], as_of: date) -> None:
    frame = goals.goals_frame(snapshot['goals'], as_of)
    if frame.empty:
        st.info("No goals set.")
        return
    st.dataframe(frame, use_container_width=True)


def render_calendar(snapshot: Dict[str, Any], as_of: date) -> None:
    settings = snapshot['settings']
    events = calendar_events.synthesize(
        snapshot['bills'],
        settings.pay_dates,
        snapshot['goals'],
        snapshot['debts'],
        as_of=as_of,
        paycheck_amount=settings.paycheck_amount,
    )
    st.plotly_chart(viz.create_calendar_chart(events), use_container_width=True)

    months = sorted({(event.date.year, event.date.month) for event in events})
    if not months:
        st.info("No events in the calendar window.")
        return
    current = (as_of.year, as_of.month)
    year, month = st.selectbox(
        "Month",
        months,
        index=months.index(current) if current in months else 0,
        format_func=lambda ym: date(ym[0], ym[1], 1).strftime("%B %Y"),
    )
    month_events = calendar_events.events_in_month(events, year, month)
    st.dataframe(calendar_events.events_frame(month_events), use_container_width=True)


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Stewardship Planner", layout="wide")
    st.title("Stewardship Planner")

    config.ensure_data_directories()
    store = StewardshipStore()
    as_of = st.sidebar.date_input("As of", value=date.today())
    if st.sidebar.button("Load sample data"):
        load_sample_data(store, as_of=as_of)
    if st.sidebar.button("Clear all data"):
        store.clear()

    snapshot = store.snapshot()
    if snapshot['settings'] is None:
        st.info("No pay settings saved yet. Load the sample data from the sidebar to explore the planner.")
        return

    overview, accounts, debt_tab, goal_tab, calendar_tab = st.tabs(
        ["Overview", "Accounts", "Debts", "Goals", "Calendar"]
    )
    with overview:
        render_overview(snapshot, as_of)
    with accounts:
        render_accounts(snapshot)
    with debt_tab:
        render_debts(snapshot)
    with goal_tab:
        render_goals(snapshot, as_of)
    with calendar_tab:
        render_calendar(snapshot, as_of)


if __name__ == "__main__":
    main()
