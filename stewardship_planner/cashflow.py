"""Per-account cash-flow projection.

Each account receives its payroll share of the averaged monthly income and
pays the bills linked to it.  Accounts are projected independently; money
moving between accounts is not modelled.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import pandas as pd

from .frequency import normalize_to_monthly
from .models import Account, AccountBalanceInfo, Bill, StewardshipSettings


def utilization_ratio(outflow: float, inflow: float) -> float:
    """Outflow as a percentage of inflow, 0 when there is no inflow."""
    if inflow <= 0:
        return 0.0
    return outflow / inflow * 100


def linked_bills(account: Account, bills: Iterable[Bill]) -> List[Bill]:
    """Active bills paid from ``account``."""
    return [bill for bill in bills if bill.account_id == account.id and bill.is_active]


def project_balances(
    accounts: Sequence[Account],
    bills: Sequence[Bill],
    settings: StewardshipSettings,
) -> List[AccountBalanceInfo]:
    """Project one month of inflow and bill outflow for every account.

    Args:
        accounts: Accounts in display order (inactive accounts are included)
        bills: All bills; only active bills linked to an account count
        settings: Pay settings supplying the paycheck amount and frequency

    Returns:
        One :class:`AccountBalanceInfo` per account, in input order
    """
    monthly_income = normalize_to_monthly(settings.paycheck_amount, settings.pay_frequency)

    results: List[AccountBalanceInfo] = []
    for account in accounts:
        account_bills = linked_bills(account, bills)
        inflow = monthly_income * account.payroll_percentage / 100
        outflow = sum(normalize_to_monthly(bill.amount, bill.frequency) for bill in account_bills)
        results.append(AccountBalanceInfo(
            account_id=account.id,
            account_name=account.nickname,
            starting_balance=account.current_balance,
            monthly_inflow=inflow,
            monthly_outflow=float(outflow),
            ending_balance=account.current_balance + inflow - outflow,
            bills_count=len(account_bills),
            utilization=utilization_ratio(outflow, inflow),
        ))
    return results


def balances_frame(balances: Sequence[AccountBalanceInfo]) -> pd.DataFrame:
    """Tabulate projected balances for display."""
    columns = [
        'Account', 'Starting Balance', 'Monthly Inflow', 'Monthly Outflow',
        'Ending Balance', 'Bills', 'Utilization %',
    ]
    rows = [
        {
            'Account': info.account_name,
            'Starting Balance': info.starting_balance,
            'Monthly Inflow': round(info.monthly_inflow, 2),
            'Monthly Outflow': round(info.monthly_outflow, 2),
            'Ending Balance': round(info.ending_balance, 2),
            'Bills': info.bills_count,
            'Utilization %': round(info.utilization, 2),
        }
        for info in balances
    ]
    return pd.DataFrame(rows, columns=columns)
