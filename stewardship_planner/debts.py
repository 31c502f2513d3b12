"""Debt payoff simulation and closed-form payoff estimates.

Two orderings are supported: the snowball (smallest balance first) and the
avalanche (highest rate first).  Within a run the order is fixed from the
starting balances and rates.  Each month every open debt accrues interest
and receives its minimum payment; the first open debt in the order also
receives the extra payment plus the minimums freed by debts already paid
off.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from . import config
from .errors import UnpayableDebt
from .formatting import format_currency
from .models import (
    Debt,
    DebtPayoffStrategy,
    DebtStrategy,
    ExtraPaymentImpact,
    MonthlyPayment,
    StrategyComparison,
    TimelineEntry,
)

StrategyLike = Union[DebtStrategy, str]

# Payoff-time gap (months) under which the avalanche is preferred outright.
SIMILAR_PAYOFF_MONTHS = 3


def order_debts(debts: Sequence[Debt], strategy: StrategyLike) -> List[Debt]:
    """Active debts in the order the strategy targets them.

    Ties keep their input order.
    """
    strategy = DebtStrategy(strategy)
    active = [debt for debt in debts if debt.is_active]
    if strategy is DebtStrategy.SNOWBALL:
        return sorted(active, key=lambda debt: debt.current_balance)
    return sorted(active, key=lambda debt: debt.interest_rate, reverse=True)


def _ensure_payable(ordered: Sequence[Debt], balances: Sequence[float], extra_payment: float) -> None:
    open_debts = [(debt, balance) for debt, balance in zip(ordered, balances) if balance > 0]
    if not open_debts:
        return
    total_balance = sum(balance for _, balance in open_debts)
    total_payment = sum(max(debt.minimum_payment, 0.0) for debt, _ in open_debts) + extra_payment
    total_interest = sum(balance * debt.interest_rate / 1200 for debt, balance in open_debts)
    if total_payment <= total_interest:
        blended_rate = total_interest * 1200 / total_balance
        raise UnpayableDebt(
            total_balance,
            total_payment,
            blended_rate,
            reason=(
                f"Total monthly payment {format_currency(total_payment)} does not exceed "
                f"the {format_currency(total_interest)} of interest accruing each month"
            ),
        )


def simulate(
    debts: Sequence[Debt],
    extra_payment: float = 0.0,
    strategy: StrategyLike = DebtStrategy.SNOWBALL,
    *,
    max_months: int = config.MAX_SIMULATION_MONTHS,
) -> DebtPayoffStrategy:
    """Simulate month-by-month payoff of ``debts`` under ``strategy``.

    Args:
        debts: Debts to pay off; inactive debts are ignored
        extra_payment: Amount paid each month on top of the minimums
        strategy: Ordering used to pick the debt receiving the extra money
        max_months: Safety bound on the simulation length

    Returns:
        :class:`DebtPayoffStrategy` with the total interest, payoff time,
        first-month payments and a balance timeline covering every debt in
        every month

    Raises:
        UnpayableDebt: If the payments never retire the balances
    """
    strategy = DebtStrategy(strategy)
    extra_payment = max(float(extra_payment), 0.0)
    ordered = order_debts(debts, strategy)
    balances = [max(debt.current_balance, 0.0) for debt in ordered]
    _ensure_payable(ordered, balances, extra_payment)

    first_payments: Dict[str, float] = {debt.id: 0.0 for debt in ordered}
    timeline: List[TimelineEntry] = []
    total_interest = 0.0
    freed_payments = 0.0
    month = 0

    while any(balance > 0 for balance in balances):
        if month >= max_months:
            index = max(range(len(ordered)), key=lambda i: balances[i])
            stuck = ordered[index]
            raise UnpayableDebt(
                balances[index],
                stuck.minimum_payment,
                stuck.interest_rate,
                debt_id=stuck.id,
                reason=f"Debt '{stuck.id}' is not paid off within {max_months} months",
            )
        month += 1
        target = next(i for i, balance in enumerate(balances) if balance > 0)
        freed_this_month = 0.0

        for index, debt in enumerate(ordered):
            balance = balances[index]
            if balance > 0:
                interest = balance * debt.interest_rate / 1200
                total_interest += interest

                payment = max(debt.minimum_payment, 0.0)
                if index == target:
                    payment += extra_payment + freed_payments
                payment = min(payment, balance + interest)

                balance = max(0.0, balance + interest - payment)
                balances[index] = balance
                if month == 1:
                    first_payments[debt.id] = payment
                if balance <= 0:
                    freed_this_month += max(debt.minimum_payment, 0.0)

            timeline.append(TimelineEntry(month=month, debt_id=debt.id, remaining_balance=balance))

        freed_payments += freed_this_month

    return DebtPayoffStrategy(
        strategy_name=strategy.display_name,
        total_interest=total_interest,
        payoff_time_months=month,
        monthly_payments=[MonthlyPayment(debt_id=debt_id, payment=amount) for debt_id, amount in first_payments.items()],
        timeline=timeline,
    )


def snowball(debts: Sequence[Debt], extra_payment: float = 0.0) -> DebtPayoffStrategy:
    """Pay the smallest balance first."""
    return simulate(debts, extra_payment, DebtStrategy.SNOWBALL)


def avalanche(debts: Sequence[Debt], extra_payment: float = 0.0) -> DebtPayoffStrategy:
    """Pay the highest interest rate first."""
    return simulate(debts, extra_payment, DebtStrategy.AVALANCHE)


def compare_strategies(debts: Sequence[Debt], extra_payment: float = 0.0) -> StrategyComparison:
    """Run both strategies and recommend one."""
    snow = snowball(debts, extra_payment)
    aval = avalanche(debts, extra_payment)
    interest_saved = snow.total_interest - aval.total_interest
    months_difference = snow.payoff_time_months - aval.payoff_time_months

    if aval.total_interest < snow.total_interest:
        recommended = DebtStrategy.AVALANCHE
        message = f"Debt Avalanche saves you {format_currency(interest_saved)} compared to Snowball."
        if abs(months_difference) <= SIMILAR_PAYOFF_MONTHS:
            message += " Both methods finish around the same time, so go with Avalanche for maximum savings!"
        else:
            message += (
                " Choose based on your personality: Avalanche for math-minded savers,"
                " Snowball for motivation-driven people."
            )
    else:
        recommended = DebtStrategy.SNOWBALL
        message = (
            "Both strategies have similar costs. Choose Snowball for psychological wins"
            " or Avalanche for mathematical optimization."
        )

    return StrategyComparison(
        snowball=snow,
        avalanche=aval,
        interest_saved=interest_saved,
        months_difference=months_difference,
        recommended=recommended,
        message=message,
    )


def payoff_time(balance: float, payment: float, rate: float, debt_id: Optional[str] = None) -> int:
    """Months to retire ``balance`` with a fixed ``payment`` at annual ``rate`` percent.

    Uses the annuity formula ``ceil(-ln(1 - B*r/P) / ln(1 + r))`` with the
    monthly rate ``r``; a zero rate amortizes linearly.

    Raises:
        UnpayableDebt: If the payment does not exceed the monthly interest

    Example:
        >>> payoff_time(3500, 105, 18.99)
        48
    """
    if balance <= 0:
        return 0
    if payment <= 0:
        raise UnpayableDebt(balance, payment, rate, debt_id=debt_id)

    monthly_rate = rate / 100 / 12
    if monthly_rate <= 0:
        return math.ceil(balance / payment)
    if payment <= balance * monthly_rate:
        raise UnpayableDebt(balance, payment, rate, debt_id=debt_id)

    months = -math.log(1 - balance * monthly_rate / payment) / math.log(1 + monthly_rate)
    return math.ceil(months)


def total_interest_for_payoff(balance: float, payment: float, rate: float, debt_id: Optional[str] = None) -> float:
    """Interest paid over the closed-form payoff, assuming full final payments."""
    months = payoff_time(balance, payment, rate, debt_id=debt_id)
    return max(0.0, months * payment - balance)


def extra_payment_impact(debt: Debt, extra_payment: float) -> ExtraPaymentImpact:
    """Compare paying only the minimum against minimum plus ``extra_payment``.

    Raises:
        UnpayableDebt: If the minimum payment alone never retires the debt
    """
    balance, rate = debt.current_balance, debt.interest_rate
    boosted = debt.minimum_payment + extra_payment

    original_months = payoff_time(balance, debt.minimum_payment, rate, debt_id=debt.id)
    original_interest = total_interest_for_payoff(balance, debt.minimum_payment, rate, debt_id=debt.id)
    new_months = payoff_time(balance, boosted, rate, debt_id=debt.id)
    new_interest = total_interest_for_payoff(balance, boosted, rate, debt_id=debt.id)

    return ExtraPaymentImpact(
        interest_saved=original_interest - new_interest,
        months_saved=original_months - new_months,
        new_payoff_months=new_months,
    )


def timeline_frame(result: DebtPayoffStrategy) -> pd.DataFrame:
    """Pivot a payoff timeline into a month x debt table of balances."""
    if not result.timeline:
        return pd.DataFrame()
    df = pd.DataFrame(
        [(entry.month, entry.debt_id, entry.remaining_balance) for entry in result.timeline],
        columns=['Month', 'Debt', 'Remaining Balance'],
    )
    pivot = df.pivot(index='Month', columns='Debt', values='Remaining Balance')
    ordered_columns = list(dict.fromkeys(df['Debt']))
    return pivot[ordered_columns].round(2)
