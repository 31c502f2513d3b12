import pytest

from stewardship_planner.debts import (
    avalanche,
    compare_strategies,
    extra_payment_impact,
    order_debts,
    payoff_time,
    simulate,
    snowball,
    timeline_frame,
    total_interest_for_payoff,
)
from stewardship_planner.errors import UnpayableDebt
from stewardship_planner.models import Debt, DebtStrategy
from stewardship_planner.sample_data import sample_debts


def _debt(id_, balance, minimum, rate, active=True):
    return Debt(
        id=id_,
        name=id_,
        current_balance=balance,
        minimum_payment=minimum,
        interest_rate=rate,
        is_active=active,
    )


def _two_debts():
    return [_debt('A', 500, 50, 5), _debt('B', 5000, 150, 20)]


def test_order_debts_by_strategy():
    debts = _two_debts()
    assert [d.id for d in order_debts(debts, 'snowball')] == ['A', 'B']
    assert [d.id for d in order_debts(debts, DebtStrategy.AVALANCHE)] == ['B', 'A']


def test_order_keeps_input_order_on_ties():
    debts = [_debt('first', 100, 10, 5), _debt('second', 100, 10, 5)]
    assert [d.id for d in order_debts(debts, 'snowball')] == ['first', 'second']
    assert [d.id for d in order_debts(debts, 'avalanche')] == ['first', 'second']


def test_extra_payment_follows_strategy_target():
    snow = snowball(_two_debts(), 1000)
    aval = avalanche(_two_debts(), 1000)

    assert snow.payoff_order() == ['A', 'B']
    assert aval.payoff_order() == ['B', 'A']
    assert snow.payoff_month('A') == 1
    assert aval.payoff_month('B') == 5
    assert snow.strategy_name == 'Debt Snowball'
    assert aval.strategy_name == 'Debt Avalanche'


def test_first_month_payments_cap_at_balance_plus_interest():
    result = snowball(_two_debts(), 1000)
    payments = {p.debt_id: p.payment for p in result.monthly_payments}
    assert payments['A'] == pytest.approx(500 + 500 * 5 / 1200)
    assert payments['B'] == 150


def test_avalanche_interest_never_exceeds_snowball():
    for debts, extra in ((_two_debts(), 0), (_two_debts(), 1000), (sample_debts(), 200)):
        assert avalanche(debts, extra).total_interest <= snowball(debts, extra).total_interest + 1e-9


def test_strategies_agree_when_order_has_no_choice():
    debts = [_debt('x', 2000, 80, 12), _debt('y', 2000, 80, 12)]
    snow = snowball(debts)
    aval = avalanche(debts)
    assert snow.total_interest == pytest.approx(aval.total_interest)
    assert snow.payoff_time_months == aval.payoff_time_months


def test_timeline_covers_every_debt_every_month():
    result = snowball(sample_debts(), 200)
    assert len(result.timeline) == result.payoff_time_months * 2
    last_month = [e for e in result.timeline if e.month == result.payoff_time_months]
    assert all(e.remaining_balance == 0 for e in last_month)
    assert result.total_interest > 0


def test_freed_minimums_roll_into_target():
    # Without rollover the loan would take far longer at its own $150 minimum.
    debts = [_debt('small', 100, 100, 0), _debt('loan', 3000, 150, 0)]
    result = snowball(debts)
    assert result.payoff_month('small') == 1
    # 2850 left after month 1, then 250/month from month 2.
    assert result.payoff_time_months == 13


def test_zero_rate_debt_pays_off_linearly():
    result = simulate([_debt('z', 1000, 300, 0)])
    assert result.payoff_time_months == 4
    assert result.total_interest == 0


def test_empty_and_inactive_debts():
    result = simulate([])
    assert result.total_interest == 0
    assert result.payoff_time_months == 0
    assert result.timeline == []
    assert simulate([_debt('gone', 1000, 50, 10, active=False)]).payoff_time_months == 0


def test_payment_below_interest_is_unpayable():
    with pytest.raises(UnpayableDebt):
        snowball([_debt('card', 3500, 50, 18.99)])


def test_simulation_is_bounded():
    with pytest.raises(UnpayableDebt) as excinfo:
        simulate([_debt('long', 3500, 105, 18.99)], max_months=12)
    assert excinfo.value.debt_id == 'long'


def test_closed_form_payoff():
    assert payoff_time(3500, 105, 18.99) == 48
    assert total_interest_for_payoff(3500, 105, 18.99) == pytest.approx(1540)
    assert payoff_time(1000, 300, 0) == 4
    assert payoff_time(0, 100, 5) == 0


def test_closed_form_rejects_payments_that_never_finish():
    with pytest.raises(UnpayableDebt) as excinfo:
        payoff_time(3500, 50, 18.99, debt_id='card')
    assert excinfo.value.balance == 3500
    assert excinfo.value.debt_id == 'card'
    with pytest.raises(ValueError):
        payoff_time(100, 0, 0)


def test_extra_payment_impact():
    impact = extra_payment_impact(_debt('card', 3500, 105, 18.99), 100)
    assert impact.new_payoff_months == 21
    assert impact.months_saved == 27
    assert impact.interest_saved == pytest.approx(1540 - (21 * 205 - 3500))


def test_compare_recommends_cheaper_avalanche():
    comparison = compare_strategies(_two_debts(), 1000)
    assert comparison.recommended is DebtStrategy.AVALANCHE
    assert comparison.interest_saved > 0
    assert comparison.months_difference == 0
    assert 'same time' in comparison.message


def test_compare_defaults_to_snowball_on_equal_cost():
    comparison = compare_strategies(sample_debts())
    assert comparison.recommended is DebtStrategy.SNOWBALL
    assert comparison.interest_saved == pytest.approx(0)
    assert comparison.message.startswith('Both strategies have similar costs')


def test_timeline_frame_pivots_months_by_debt():
    result = snowball(_two_debts(), 1000)
    frame = timeline_frame(result)
    assert list(frame.columns) == ['A', 'B']
    assert len(frame) == result.payoff_time_months
    assert frame.loc[1, 'A'] == 0
    assert timeline_frame(simulate([])).empty


def test_extra_payment_impact_needs_payable_minimum():
    with pytest.raises(UnpayableDebt) as excinfo:
        extra_payment_impact(_debt('card', 3500, 50, 18.99), 100)
    assert excinfo.value.debt_id == 'card'
