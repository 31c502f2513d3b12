from datetime import date

import pytest

from stewardship_planner.goals import goals_frame, months_until, progress, projected_completion, rank_goals
from stewardship_planner.models import SavingsGoal

AS_OF = date(2024, 1, 1)


def _goal(target=1200, current=0, target_date=date(2025, 1, 1), contribution=0, priority=3, id_='goal', active=True):
    return SavingsGoal(
        id=id_,
        name=id_.title(),
        target_amount=target,
        current_amount=current,
        target_date=target_date,
        monthly_contribution=contribution,
        priority=priority,
        is_active=active,
    )


def test_months_are_thirty_day_blocks_rounded_up():
    assert months_until(date(2024, 1, 31), AS_OF) == 1
    assert months_until(date(2024, 2, 1), AS_OF) == 2
    assert months_until(date(2024, 3, 1), AS_OF) == 2
    assert months_until(date(2023, 12, 1), AS_OF) == 0


def test_fully_funded_goal_is_on_track():
    status = progress(_goal(target=1000, current=1000, target_date=date(2024, 6, 1)), AS_OF)
    assert status.progress_percentage == 100
    assert status.on_track
    assert status.required_monthly_contribution == 0


def test_progress_caps_at_one_hundred_percent():
    status = progress(_goal(target=1000, current=1500, target_date=date(2023, 6, 1)), AS_OF)
    assert status.progress_percentage == 100
    assert status.on_track


def test_contribution_decides_on_track():
    # 366 days to target -> 13 months -> 92.31/month required
    behind = progress(_goal(contribution=50), AS_OF)
    assert behind.months_remaining == 13
    assert behind.required_monthly_contribution == pytest.approx(1200 / 13)
    assert not behind.on_track

    assert progress(_goal(contribution=100), AS_OF).on_track


def test_missed_deadline_has_no_required_contribution():
    status = progress(_goal(current=300, target_date=date(2023, 12, 1), contribution=1000), AS_OF)
    assert status.months_remaining == 0
    assert status.required_monthly_contribution is None
    assert status.progress_percentage == pytest.approx(25)
    assert not status.on_track


def test_zero_target_reports_no_progress():
    status = progress(_goal(target=0, current=0), AS_OF)
    assert status.progress_percentage == 0


def test_rank_goals_by_priority_then_date():
    goals = [
        _goal(id_='late', priority=2, target_date=date(2026, 1, 1)),
        _goal(id_='soon', priority=2, target_date=date(2025, 1, 1)),
        _goal(id_='first', priority=1, target_date=date(2027, 1, 1)),
        _goal(id_='paused', priority=1, active=False),
    ]
    ranked = rank_goals(goals, AS_OF)
    assert [goal.id for goal, _ in ranked] == ['first', 'soon', 'late']


def test_goals_frame_rounds_for_display():
    frame = goals_frame([_goal(contribution=100)], AS_OF)
    assert frame.loc[0, 'Required / mo'] == pytest.approx(92.31)
    assert bool(frame.loc[0, 'On Track'])
    assert goals_frame([], AS_OF).empty


def test_projected_completion_from_contribution():
    projection = projected_completion(_goal(contribution=250), AS_OF)
    assert not projection.achieved
    assert projection.months_to_complete == 5
    assert projection.completion_date == date(2024, 6, 1)


def test_projected_completion_when_already_funded():
    projection = projected_completion(_goal(target=1000, current=1200), AS_OF)
    assert projection.achieved
    assert projection.months_to_complete == 0


def test_projected_completion_without_contribution():
    projection = projected_completion(_goal(contribution=0), AS_OF)
    assert not projection.achieved
    assert projection.months_to_complete is None
    assert projection.completion_date is None


def test_goals_frame_shows_projection():
    frame = goals_frame([_goal(contribution=100), _goal(id_='done', current=1200, priority=4)], AS_OF)
    assert frame.loc[0, 'Months to Complete'] == 12
    assert frame.loc[0, 'Projected Completion'] == '2025-01-01'
    assert frame.loc[1, 'Projected Completion'] == 'Goal already achieved!'
