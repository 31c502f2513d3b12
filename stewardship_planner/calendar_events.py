"""Unified calendar of paychecks, bills, goal milestones and debt payments.

Recurring bills and debts are expanded into dated occurrences over a
forward window.  Occurrence ``k`` is computed from the anchor date rather
than from the previous occurrence, so a bill due on the 31st lands on the
last day of shorter months without drifting earlier afterwards.

Debt payment events are scheduled minimums: they continue through the
window even when a payoff simulation would retire the debt sooner.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional, Sequence, Union

import pandas as pd

from . import config
from .errors import InvalidFrequency
from .models import (
    BILL_FREQUENCIES,
    Bill,
    CalendarEvent,
    Debt,
    EventKey,
    EventStatus,
    EventType,
    Frequency,
    SavingsGoal,
    parse_date,
)


def add_months(anchor: date, months: int) -> date:
    """Shift ``anchor`` by calendar months, clamping to the month's last day."""
    return (pd.Timestamp(anchor) + pd.DateOffset(months=months)).date()


def horizon_end(as_of: date, horizon_months: int = config.DEFAULT_HORIZON_MONTHS) -> date:
    """Last date (inclusive) covered by the calendar window."""
    return add_months(as_of, horizon_months)


def _nth_occurrence(anchor: date, frequency: Frequency, n: int) -> date:
    if frequency is Frequency.WEEKLY:
        return anchor + timedelta(days=7 * n)
    if frequency is Frequency.BI_WEEKLY:
        return anchor + timedelta(days=14 * n)
    if frequency is Frequency.MONTHLY:
        return add_months(anchor, n)
    if frequency is Frequency.QUARTERLY:
        return add_months(anchor, 3 * n)
    if frequency is Frequency.ANNUAL:
        return add_months(anchor, 12 * n)
    raise InvalidFrequency(frequency, sorted(f.value for f in BILL_FREQUENCIES))


def occurrences(anchor: date, frequency: Frequency, end: date) -> Iterator[date]:
    """Yield ``anchor`` and its recurrences up to and including ``end``."""
    n = 0
    current = anchor
    while current <= end:
        yield current
        n += 1
        current = _nth_occurrence(anchor, frequency, n)


def _paid_or_upcoming(when: date, as_of: date) -> EventStatus:
    return EventStatus.PAID if when < as_of else EventStatus.UPCOMING


def _goal_status(goal: SavingsGoal, as_of: date) -> EventStatus:
    ratio = goal.current_amount / goal.target_amount if goal.target_amount > 0 else 0.0
    if ratio >= 1:
        return EventStatus.COMPLETED
    if goal.target_date < as_of:
        return EventStatus.OVERDUE
    return EventStatus.UPCOMING


def synthesize(
    bills: Sequence[Bill],
    pay_dates: Iterable[Union[date, str]],
    goals: Sequence[SavingsGoal],
    debts: Sequence[Debt],
    as_of: Optional[date] = None,
    horizon_months: int = config.DEFAULT_HORIZON_MONTHS,
    paycheck_amount: Optional[float] = None,
) -> List[CalendarEvent]:
    """Build the chronologically sorted event list for the calendar window.

    Args:
        bills: Bills; inactive bills and bills without a due date are skipped
        pay_dates: Explicit pay dates (``date`` objects or ISO strings)
        goals: Savings goals; inactive goals are skipped
        debts: Debts; inactive debts and debts without a due date are skipped
        as_of: Reference date for statuses; defaults to today
        horizon_months: Window length in calendar months
        paycheck_amount: Amount shown on paycheck events, if known

    Returns:
        Events sorted by date; same-day events keep the order paychecks,
        bills, goals, debts
    """
    as_of = as_of or date.today()
    end = horizon_end(as_of, horizon_months)
    events: List[CalendarEvent] = []

    for value in pay_dates:
        pay_date = parse_date(value)
        if pay_date is None or pay_date > end:
            continue
        events.append(CalendarEvent(
            key=EventKey(EventType.PAYCHECK, None, pay_date),
            title='Paycheck',
            date=pay_date,
            event_type=EventType.PAYCHECK,
            status=_paid_or_upcoming(pay_date, as_of),
            amount=paycheck_amount,
            category='income',
        ))

    for bill in bills:
        if not bill.is_active or bill.due_date is None:
            continue
        for when in occurrences(bill.due_date, bill.frequency, end):
            events.append(CalendarEvent(
                key=EventKey(EventType.BILL, bill.id, when),
                title=bill.name,
                date=when,
                event_type=EventType.BILL,
                status=_paid_or_upcoming(when, as_of),
                amount=bill.amount,
                related_id=bill.id,
                category=bill.category or None,
            ))

    for goal in goals:
        if not goal.is_active or goal.target_date > end:
            continue
        events.append(CalendarEvent(
            key=EventKey(EventType.GOAL_MILESTONE, goal.id, goal.target_date),
            title=f"{goal.name} Target",
            date=goal.target_date,
            event_type=EventType.GOAL_MILESTONE,
            status=_goal_status(goal, as_of),
            amount=goal.target_amount,
            related_id=goal.id,
            category=goal.goal_type.value,
        ))

    for debt in debts:
        if not debt.is_active or debt.due_date is None:
            continue
        for when in occurrences(debt.due_date, Frequency.MONTHLY, end):
            events.append(CalendarEvent(
                key=EventKey(EventType.DEBT_PAYMENT, debt.id, when),
                title=f"{debt.name} Payment",
                date=when,
                event_type=EventType.DEBT_PAYMENT,
                status=_paid_or_upcoming(when, as_of),
                amount=debt.minimum_payment,
                related_id=debt.id,
                category='debt',
            ))

    return sorted(events, key=lambda event: event.date)


def events_in_month(events: Iterable[CalendarEvent], year: int, month: int) -> List[CalendarEvent]:
    """Events falling in the given calendar month, for month-grid views."""
    return [event for event in events if event.date.year == year and event.date.month == month]


def events_frame(events: Sequence[CalendarEvent]) -> pd.DataFrame:
    """Tabulate events for display or export."""
    columns = ['Date', 'Title', 'Type', 'Status', 'Amount', 'Category', 'Event ID']
    rows = [
        {
            'Date': event.date,
            'Title': event.title,
            'Type': event.event_type.value,
            'Status': event.status.value,
            'Amount': event.amount,
            'Category': event.category,
            'Event ID': event.id,
        }
        for event in events
    ]
    return pd.DataFrame(rows, columns=columns)
