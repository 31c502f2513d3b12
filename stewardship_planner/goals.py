"""Savings goal progress projections."""

from __future__ import annotations

import math
from datetime import date
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from .calendar_events import add_months
from .models import GoalProgress, GoalProjection, SavingsGoal

# Months are approximated as 30 days when measuring time to a target date.
DAYS_PER_MONTH = 30


def months_until(target: date, as_of: date) -> int:
    """Whole months (30-day blocks, rounded up) from ``as_of`` to ``target``."""
    days = (target - as_of).days
    return max(0, math.ceil(days / DAYS_PER_MONTH))


def progress(goal: SavingsGoal, as_of: Optional[date] = None) -> GoalProgress:
    """Percent complete and on-track status of a savings goal.

    A goal is on track when it is already funded or when its monthly
    contribution covers the remaining amount spread over the months left.
    With no months left and the target unmet, the required contribution is
    undefined and the goal is not on track.

    Args:
        goal: The goal to evaluate
        as_of: Reference date; defaults to today

    Returns:
        :class:`GoalProgress`
    """
    as_of = as_of or date.today()
    if goal.target_amount > 0:
        percentage = min(100.0, goal.current_amount / goal.target_amount * 100)
    else:
        percentage = 0.0
    months_remaining = months_until(goal.target_date, as_of)
    remaining = goal.target_amount - goal.current_amount

    if months_remaining > 0:
        required: Optional[float] = max(0.0, remaining / months_remaining)
    else:
        required = None

    if percentage >= 100:
        on_track = True
    elif required is None:
        on_track = False
    else:
        on_track = goal.monthly_contribution >= required

    return GoalProgress(
        progress_percentage=percentage,
        months_remaining=months_remaining,
        on_track=on_track,
        required_monthly_contribution=required,
    )


def projected_completion(goal: SavingsGoal, as_of: Optional[date] = None) -> GoalProjection:
    """When the goal is reached if the monthly contribution continues.

    A funded goal is already achieved.  Without a positive contribution
    the goal is never reached and both fields are ``None``.
    """
    as_of = as_of or date.today()
    remaining = goal.target_amount - goal.current_amount
    if remaining <= 0:
        return GoalProjection(achieved=True, months_to_complete=0, completion_date=as_of)
    if goal.monthly_contribution <= 0:
        return GoalProjection(achieved=False, months_to_complete=None, completion_date=None)
    months = math.ceil(remaining / goal.monthly_contribution)
    return GoalProjection(achieved=False, months_to_complete=months, completion_date=add_months(as_of, months))


def rank_goals(
    goals: Sequence[SavingsGoal],
    as_of: Optional[date] = None,
) -> List[Tuple[SavingsGoal, GoalProgress]]:
    """Active goals ordered by priority (1 first) then target date."""
    active = [goal for goal in goals if goal.is_active]
    ordered = sorted(active, key=lambda goal: (goal.priority, goal.target_date))
    return [(goal, progress(goal, as_of)) for goal in ordered]


def goals_frame(goals: Sequence[SavingsGoal], as_of: Optional[date] = None) -> pd.DataFrame:
    """Tabulate ranked goals with their progress."""
    columns = [
        'Goal', 'Priority', 'Target Date', 'Target', 'Current', 'Progress %',
        'Months Remaining', 'Required / mo', 'Contribution / mo', 'On Track',
        'Months to Complete', 'Projected Completion',
    ]
    rows = []
    for goal, status in rank_goals(goals, as_of):
        projection = projected_completion(goal, as_of)
        rows.append({
            'Goal': goal.name,
            'Priority': goal.priority,
            'Target Date': goal.target_date,
            'Target': goal.target_amount,
            'Current': goal.current_amount,
            'Progress %': round(status.progress_percentage, 2),
            'Months Remaining': status.months_remaining,
            'Required / mo': (
                round(status.required_monthly_contribution, 2)
                if status.required_monthly_contribution is not None
                else None
            ),
            'Contribution / mo': goal.monthly_contribution,
            'On Track': status.on_track,
            'Months to Complete': projection.months_to_complete,
            'Projected Completion': (
                'Goal already achieved!' if projection.achieved
                else projection.completion_date.isoformat() if projection.completion_date
                else None
            ),
        })
    return pd.DataFrame(rows, columns=columns)
