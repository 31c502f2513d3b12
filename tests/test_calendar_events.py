from datetime import date

from stewardship_planner.calendar_events import (
    add_months,
    events_frame,
    events_in_month,
    horizon_end,
    occurrences,
    synthesize,
)
from stewardship_planner.models import (
    Bill,
    Debt,
    EventStatus,
    EventType,
    Frequency,
    SavingsGoal,
)

AS_OF = date(2024, 8, 1)


def _bill(due, frequency='monthly', id_='b1', active=True):
    return Bill(id=id_, name='Rent', amount=1200, frequency=frequency, due_date=due, category='Housing', is_active=active)


def _goal(target_date, current=100, target=1000, id_='g1'):
    return SavingsGoal(
        id=id_,
        name='Trip',
        target_amount=target,
        current_amount=current,
        target_date=target_date,
    )


def _debt(due, id_='d1', active=True):
    return Debt(
        id=id_,
        name='Card',
        current_balance=3500,
        minimum_payment=105,
        interest_rate=18.99,
        due_date=due,
        is_active=active,
    )


def test_monthly_bill_expands_over_three_months():
    events = synthesize([_bill(AS_OF)], [], [], [], as_of=AS_OF)
    assert [e.date for e in events] == [
        date(2024, 8, 1), date(2024, 9, 1), date(2024, 10, 1), date(2024, 11, 1),
    ]
    assert all(e.status is EventStatus.UPCOMING for e in events)
    assert events[0].id == 'bill_b1_2024-08-01'


def test_month_end_anchor_does_not_drift():
    anchor = date(2024, 1, 31)
    end = horizon_end(anchor, 3)
    assert end == date(2024, 4, 30)
    assert list(occurrences(anchor, Frequency.MONTHLY, end)) == [
        date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30),
    ]


def test_add_months_clamps_to_month_end():
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)


def test_other_bill_frequencies():
    end = horizon_end(AS_OF, 1)
    assert len(list(occurrences(AS_OF, Frequency.WEEKLY, end))) == 5
    assert len(list(occurrences(AS_OF, Frequency.BI_WEEKLY, end))) == 3
    assert len(synthesize([_bill(AS_OF, 'quarterly')], [], [], [], as_of=AS_OF)) == 2
    assert len(synthesize([_bill(AS_OF, 'annual')], [], [], [], as_of=AS_OF)) == 1


def test_past_occurrences_are_marked_paid():
    events = synthesize([_bill(date(2024, 7, 1))], [], [], [], as_of=AS_OF)
    assert len(events) == 5
    assert events[0].status is EventStatus.PAID
    assert events[1].status is EventStatus.UPCOMING


def test_pay_dates_within_window():
    pay_dates = ['2024-08-01', '2024-08-15', '2024-12-20']
    events = synthesize([], pay_dates, [], [], as_of=date(2024, 8, 10), paycheck_amount=1500)

    assert [e.date for e in events] == [date(2024, 8, 1), date(2024, 8, 15)]
    assert [e.status for e in events] == [EventStatus.PAID, EventStatus.UPCOMING]
    assert events[0].id == 'paycheck_2024-08-01'
    assert events[0].amount == 1500
    assert events[0].category == 'income'


def test_goal_milestone_status():
    goals = [
        _goal(date(2024, 9, 1), current=1000, id_='done'),
        _goal(date(2024, 7, 1), id_='late'),
        _goal(date(2024, 10, 1), id_='next'),
        _goal(date(2025, 6, 1), id_='far'),
    ]
    events = synthesize([], [], goals, [], as_of=AS_OF)
    statuses = {e.related_id: e.status for e in events}

    assert statuses == {
        'done': EventStatus.COMPLETED,
        'late': EventStatus.OVERDUE,
        'next': EventStatus.UPCOMING,
    }
    assert events[0].title == 'Trip Target'


def test_debt_payments_repeat_monthly():
    events = synthesize([], [], [], [_debt(date(2024, 8, 15))], as_of=AS_OF)
    assert len(events) == 3
    assert {e.amount for e in events} == {105}
    assert {e.category for e in events} == {'debt'}
    assert events[0].title == 'Card Payment'


def test_inactive_items_are_skipped():
    events = synthesize([_bill(AS_OF, active=False)], [], [], [_debt(AS_OF, active=False)], as_of=AS_OF)
    assert events == []


def test_same_day_events_keep_generation_order():
    day = date(2024, 8, 15)
    events = synthesize([_bill(day)], [day], [_goal(day)], [_debt(day)], as_of=day, horizon_months=0)
    assert [e.event_type for e in events] == [
        EventType.PAYCHECK, EventType.BILL, EventType.GOAL_MILESTONE, EventType.DEBT_PAYMENT,
    ]


def test_event_ids_are_unique_and_sorted():
    bills = [_bill(AS_OF, id_='b1'), _bill(date(2024, 8, 20), 'bi-weekly', id_='b2')]
    events = synthesize(bills, ['2024-08-15'], [], [_debt(AS_OF)], as_of=AS_OF)
    ids = [e.id for e in events]
    assert len(ids) == len(set(ids))
    assert [e.date for e in events] == sorted(e.date for e in events)


def test_events_in_month_and_frame():
    events = synthesize([_bill(AS_OF)], [], [], [], as_of=AS_OF)
    september = events_in_month(events, 2024, 9)
    assert [e.date for e in september] == [date(2024, 9, 1)]

    frame = events_frame(events)
    assert len(frame) == 4
    assert frame.loc[0, 'Event ID'] == 'bill_b1_2024-08-01'
    assert events_frame([]).empty
