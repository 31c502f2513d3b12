from datetime import date

import pytest

from stewardship_planner.cashflow import balances_frame, project_balances, utilization_ratio
from stewardship_planner.models import Account, AccountCategory, Bill, Frequency, StewardshipSettings
from stewardship_planner.sample_data import sample_accounts, sample_bills, sample_settings


def _account(id_='acct', pct=50.0, balance=0.0, active=True):
    return Account(
        id=id_,
        nickname=id_.title(),
        category=AccountCategory.BILLS,
        payroll_percentage=pct,
        current_balance=balance,
        is_active=active,
    )


def _bill(id_, amount, account_id='acct', frequency='monthly', active=True):
    return Bill(
        id=id_,
        name=id_,
        amount=amount,
        frequency=frequency,
        due_date=date(2024, 8, 1),
        account_id=account_id,
        is_active=active,
    )


def test_sample_bills_account_projection():
    balances = project_balances(sample_accounts(), sample_bills(), sample_settings())
    bills_account = next(info for info in balances if info.account_id == 'account_bills_001')

    assert bills_account.monthly_inflow == pytest.approx(1137.5)
    assert bills_account.monthly_outflow == pytest.approx(1980)
    assert bills_account.ending_balance == pytest.approx(357.5)
    assert bills_account.utilization == pytest.approx(1980 / 1137.5 * 100)
    assert bills_account.bills_count == 7


def test_one_entry_per_account_in_input_order():
    accounts = sample_accounts()
    balances = project_balances(accounts, sample_bills(), sample_settings())
    assert [info.account_id for info in balances] == [account.id for account in accounts]


def test_outflow_normalizes_each_bill_frequency():
    settings = StewardshipSettings(paycheck_amount=1000, pay_frequency='monthly')
    bills = [_bill('gym', 100, frequency='weekly'), _bill('insurance', 600, frequency=Frequency.ANNUAL)]
    [info] = project_balances([_account(pct=100)], bills, settings)
    assert info.monthly_outflow == pytest.approx(100 * 52 / 12 + 50)


def test_inactive_and_unlinked_bills_are_ignored():
    settings = StewardshipSettings(paycheck_amount=1000, pay_frequency='monthly')
    bills = [
        _bill('rent', 300),
        _bill('old', 200, active=False),
        _bill('elsewhere', 50, account_id='other'),
        _bill('orphan', 75, account_id=None),
    ]
    [info] = project_balances([_account(pct=50, balance=20)], bills, settings)
    assert info.monthly_outflow == 300
    assert info.bills_count == 1
    assert info.ending_balance == pytest.approx(20 + 500 - 300)


def test_utilization_is_zero_without_inflow():
    settings = StewardshipSettings(paycheck_amount=1000, pay_frequency='monthly')
    [info] = project_balances([_account(pct=0)], [_bill('rent', 300)], settings)
    assert info.monthly_inflow == 0
    assert info.utilization == 0
    assert utilization_ratio(100, -5) == 0


def test_empty_inputs_produce_empty_projection():
    assert project_balances([], [], sample_settings()) == []
    assert balances_frame([]).empty


def test_balances_frame_has_one_row_per_account():
    frame = balances_frame(project_balances(sample_accounts(), sample_bills(), sample_settings()))
    assert len(frame) == 10
    assert 'Utilization %' in frame.columns
    assert frame.loc[frame['Account'] == 'Bills Account', 'Bills'].item() == 7
