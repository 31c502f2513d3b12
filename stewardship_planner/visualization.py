"""Plotly visualisation helpers for the stewardship planner.

Each function accepts the plain result records produced by the
calculation modules (or the DataFrames built from them) and returns a
`plotly.graph_objects.Figure` that Streamlit can render via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .debts import timeline_frame
from .models import Account, AccountBalanceInfo, CalendarEvent, DebtPayoffStrategy, StrategyComparison


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_allocation_pie_chart(accounts: Sequence[Account], title: str | None = None) -> go.Figure:
    """Pie chart of the paycheck split across active accounts.

    Any unallocated share is shown as its own slice.

    Parameters
    ----------
    accounts : sequence of Account
        Accounts with payroll percentages.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart of allocation percentages.
    """
    rows = [
        {"Account": account.nickname, "Percentage": account.payroll_percentage}
        for account in accounts
        if account.is_active and account.payroll_percentage > 0
    ]
    if not rows:
        return _empty_figure()
    allocated = sum(row["Percentage"] for row in rows)
    if allocated < 100:
        rows.append({"Account": "Unallocated", "Percentage": 100 - allocated})
    df = pd.DataFrame(rows)
    fig = px.pie(df, names="Account", values="Percentage")
    fig.update_layout(title=title or "Paycheck allocation")
    return fig


def create_cash_flow_chart(balances: Sequence[AccountBalanceInfo], title: str | None = None) -> go.Figure:
    """Grouped bars of monthly inflow versus bill outflow per account.

    Parameters
    ----------
    balances : sequence of AccountBalanceInfo
        Output of :func:`stewardship_planner.cashflow.project_balances`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Grouped bar chart.
    """
    if not balances:
        return _empty_figure()
    df = pd.DataFrame([
        {"Account": info.account_name, "Flow": flow, "Amount": amount}
        for info in balances
        for flow, amount in (("Inflow", info.monthly_inflow), ("Outflow", info.monthly_outflow))
    ])
    fig = px.bar(df, x="Account", y="Amount", color="Flow", barmode="group")
    fig.update_layout(
        title=title or "Monthly cash flow by account",
        xaxis_title="Account",
        yaxis_title="Amount ($)",
    )
    return fig


def create_debt_timeline_chart(result: DebtPayoffStrategy, title: str | None = None) -> go.Figure:
    """Line chart of each debt's remaining balance over the simulated months."""
    pivot = timeline_frame(result)
    if pivot.empty:
        return _empty_figure()
    long_df = pivot.reset_index().melt(id_vars="Month", var_name="Debt", value_name="Remaining Balance")
    fig = px.line(long_df, x="Month", y="Remaining Balance", color="Debt")
    fig.update_layout(
        title=title or f"{result.strategy_name} payoff timeline",
        xaxis_title="Month",
        yaxis_title="Remaining balance ($)",
    )
    return fig


def create_strategy_comparison_chart(comparison: StrategyComparison, title: str | None = None) -> go.Figure:
    """Side-by-side bars of total interest and payoff months for both strategies."""
    results = (comparison.snowball, comparison.avalanche)
    fig = go.Figure()
    fig.add_trace(go.Bar(
        name="Total interest ($)",
        x=[result.strategy_name for result in results],
        y=[round(result.total_interest, 2) for result in results],
    ))
    fig.add_trace(go.Bar(
        name="Payoff time (months)",
        x=[result.strategy_name for result in results],
        y=[result.payoff_time_months for result in results],
    ))
    fig.update_layout(
        title=title or "Snowball vs avalanche",
        barmode="group",
    )
    return fig


def create_calendar_chart(events: Sequence[CalendarEvent], title: str | None = None) -> go.Figure:
    """Scatter of upcoming events by date, coloured by event type."""
    if not events:
        return _empty_figure()
    df = pd.DataFrame([
        {
            "Date": event.date,
            "Title": event.title,
            "Type": event.event_type.value,
            "Status": event.status.value,
            "Amount": event.amount or 0.0,
        }
        for event in events
    ])
    fig = px.scatter(df, x="Date", y="Amount", color="Type", hover_name="Title", hover_data=["Status"])
    fig.update_layout(
        title=title or "Financial calendar",
        xaxis_title="Date",
        yaxis_title="Amount ($)",
    )
    return fig
