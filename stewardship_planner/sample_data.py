"""Sample household used by the dashboard demo and the tests.

A bi-weekly $1,500 paycheck paid from the first of the current month, ten
accounts whose percentages total 100%, everyday bills, two debts and four
savings goals dated relative to ``as_of``.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .models import (
    Account,
    AccountCategory,
    Bill,
    Debt,
    Frequency,
    GoalType,
    SavingsGoal,
    StewardshipSettings,
)
from .storage import StewardshipStore

BILLS_ACCOUNT = 'account_bills_001'
GROCERIES_ACCOUNT = 'account_groceries_001'

# Bi-weekly schedule length; covers the month of as_of plus the calendar window.
SAMPLE_PAYCHECKS = 8


def sample_pay_dates(as_of: Optional[date] = None) -> Tuple[date, ...]:
    """Bi-weekly pay dates starting on the first of ``as_of``'s month."""
    start = (as_of or date.today()).replace(day=1)
    return tuple(start + timedelta(days=14 * n) for n in range(SAMPLE_PAYCHECKS))


def sample_settings(as_of: Optional[date] = None) -> StewardshipSettings:
    as_of = as_of or date.today()
    pay_dates = sample_pay_dates(as_of)
    return StewardshipSettings(
        paycheck_amount=1500,
        pay_frequency=Frequency.BI_WEEKLY,
        tithing_enabled=True,
        tithing_percentage=10,
        emergency_fund_percentage=5,
        pay_dates=pay_dates,
        faith_based_mode=True,
        next_pay_date=next((d for d in pay_dates if d >= as_of), None),
    )


def sample_accounts() -> List[Account]:
    rows = [
        ('account_tithing_001', 'Tithing & Giving', AccountCategory.TITHING, 10, 800),
        ('account_emergency_001', 'Emergency Fund', AccountCategory.SAVINGS, 5, 2500),
        (BILLS_ACCOUNT, 'Bills Account', AccountCategory.BILLS, 35, 1200),
        ('account_house_001', 'House Fund', AccountCategory.SAVINGS, 8, 5000),
        (GROCERIES_ACCOUNT, 'Groceries & Gas', AccountCategory.EXPENSES, 15, 600),
        ('account_vacation_001', 'Vacation Fund', AccountCategory.SAVINGS, 5, 1200),
        ('account_car_001', 'Car Maintenance', AccountCategory.EXPENSES, 3, 800),
        ('account_clothes_001', 'Clothing Fund', AccountCategory.EXPENSES, 3, 300),
        ('account_kids_001', 'Kids Activities', AccountCategory.EXPENSES, 8, 450),
        ('account_misc_001', 'Miscellaneous', AccountCategory.EXPENSES, 8, 200),
    ]
    return [
        Account(id=id_, nickname=name, category=category, payroll_percentage=pct, current_balance=balance)
        for id_, name, category, pct, balance in rows
    ]


def sample_bills() -> List[Bill]:
    rows = [
        ('bill_rent_001', 'Rent', 1200, '2024-08-01', BILLS_ACCOUNT, 'Housing'),
        ('bill_electric_001', 'Electric Bill', 120, '2024-08-15', BILLS_ACCOUNT, 'Utilities'),
        ('bill_water_001', 'Water Bill', 45, '2024-08-10', BILLS_ACCOUNT, 'Utilities'),
        ('bill_internet_001', 'Internet', 60, '2024-08-20', BILLS_ACCOUNT, 'Utilities'),
        ('bill_phone_001', 'Phone', 80, '2024-08-25', BILLS_ACCOUNT, 'Utilities'),
        ('bill_car_001', 'Car Payment', 350, '2024-08-05', BILLS_ACCOUNT, 'Transportation'),
        ('bill_insurance_001', 'Car Insurance', 125, '2024-08-12', BILLS_ACCOUNT, 'Insurance'),
        ('bill_groceries_001', 'Groceries', 400, '2024-08-01', GROCERIES_ACCOUNT, 'Living'),
        ('bill_gas_001', 'Gas/Fuel', 200, '2024-08-01', GROCERIES_ACCOUNT, 'Transportation'),
    ]
    return [
        Bill(
            id=id_,
            name=name,
            amount=amount,
            frequency=Frequency.MONTHLY,
            due_date=date.fromisoformat(due),
            account_id=account_id,
            category=category,
        )
        for id_, name, amount, due, account_id, category in rows
    ]


def sample_debts() -> List[Debt]:
    return [
        Debt(
            id='debt_credit_001',
            name='Credit Card',
            current_balance=3500,
            minimum_payment=105,
            interest_rate=18.99,
            account_id=BILLS_ACCOUNT,
            due_date=date(2024, 8, 15),
        ),
        Debt(
            id='debt_student_001',
            name='Student Loan',
            current_balance=15000,
            minimum_payment=150,
            interest_rate=4.5,
            account_id=BILLS_ACCOUNT,
            due_date=date(2024, 8, 1),
        ),
    ]


def sample_goals(as_of: Optional[date] = None) -> List[SavingsGoal]:
    as_of = as_of or date.today()
    rows = [
        ('goal_emergency_001', 'Emergency Fund', GoalType.EMERGENCY, 10000, 2500, 365, 500, 'account_emergency_001', 1),
        ('goal_house_001', 'House Down Payment', GoalType.HOUSE, 50000, 5000, 730, 1500, 'account_house_001', 2),
        ('goal_vacation_001', 'European Vacation', GoalType.VACATION, 8000, 1200, 400, 500, 'account_vacation_001', 3),
        ('goal_car_001', 'New Car Fund', GoalType.CAR, 25000, 800, 1095, 600, 'account_car_001', 4),
    ]
    return [
        SavingsGoal(
            id=id_,
            name=name,
            goal_type=goal_type,
            target_amount=target,
            current_amount=current,
            target_date=as_of + timedelta(days=days_out),
            monthly_contribution=contribution,
            account_id=account_id,
            priority=priority,
        )
        for id_, name, goal_type, target, current, days_out, contribution, account_id, priority in rows
    ]


def sample_snapshot(as_of: Optional[date] = None) -> Dict[str, Any]:
    """The sample household in the shape returned by ``StewardshipStore.snapshot``."""
    return {
        'accounts': sample_accounts(),
        'bills': sample_bills(),
        'debts': sample_debts(),
        'goals': sample_goals(as_of),
        'settings': sample_settings(as_of),
    }


def load_sample_data(store: StewardshipStore, as_of: Optional[date] = None) -> None:
    """Replace the store's contents with the sample household."""
    snapshot = sample_snapshot(as_of)
    store.save_settings(snapshot['settings'])
    store.save_accounts(snapshot['accounts'])
    store.save_bills(snapshot['bills'])
    store.save_debts(snapshot['debts'])
    store.save_goals(snapshot['goals'])
