"""Budget allocation, validation and recommendation utilities.

This module provides functions for summarizing how a paycheck is split
across accounts, validating that the split does not exceed the income,
and generating allocation and bill-reduction suggestions.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import config
from .cashflow import project_balances
from .formatting import format_percentage
from .frequency import current_month_income, normalize_to_monthly
from .models import (
    Account,
    AccountCategory,
    Allocation,
    Bill,
    BreakdownItem,
    BudgetValidation,
    DebtReductionSuggestion,
    FinancialSummary,
    PaycheckBreakdown,
    Recommendation,
    StewardshipSettings,
)

NON_NEGOTIABLE_CATEGORIES = {'Housing', 'Utilities', 'Transportation', 'Insurance'}
NEGOTIABLE_CATEGORIES = {'Entertainment', 'Subscriptions', 'Dining', 'Shopping'}
LIFESTYLE_CATEGORIES = {'Living', 'Health', 'Personal'}

# Bills in an essential category whose name marks them as discretionary.
DISCRETIONARY_NAME_KEYWORDS = ('netflix', 'spotify', 'gym', 'entertainment')
SUBSCRIPTION_NAME_KEYWORDS = ('netflix', 'spotify', 'gym', 'amazon prime', 'disney', 'hulu')
STAPLE_NAME_KEYWORDS = ('rent', 'mortgage', 'groceries')

NON_NEGOTIABLE_TIPS = (
    'Bundle utilities or switch to energy-efficient options for savings',
    'Refinance auto loans if rates have improved since purchase',
    'Review insurance coverage - remove unnecessary add-ons but keep essential protection',
)
NEGOTIABLE_TIPS = (
    'Cancel unused subscriptions - average household has 3.4 unused services',
    'Share family plans instead of individual subscriptions',
    'Use free alternatives: YouTube instead of premium music, library books/movies',
    'Set entertainment budget and stick to it - consider cash envelope method',
    'Pause subscriptions during debt payoff sprint (temporary sacrifice for freedom)',
)
LIFESTYLE_TIPS = (
    'Meal prep and cook at home more - can save $200-400/month on dining out',
    'Shop with a list and avoid impulse purchases',
    'Buy generic brands for household items (often 20-30% cheaper)',
    'Use the 24-hour rule for non-essential purchases over $50',
    'Find free alternatives: home workouts vs gym, library events vs paid entertainment',
)
HIGH_EXPENSE_TIPS = (
    'Your expenses are over 70% of income - this makes debt payoff very difficult',
    'Consider increasing income through side hustle, skills training, or job change',
    'Look into downsizing housing if it exceeds 30% of income',
    "Sell items you don't need to generate extra debt payments",
    'Consider temporary extreme measures: move in with family, sell car for cheaper option',
)


def calculate_bill_percentage(bill_amount: float, paycheck_amount: float) -> float:
    """Share of a single paycheck consumed by a bill, in percent.

    Example:
        >>> round(calculate_bill_percentage(1200, 1750), 2)
        68.57
    """
    if paycheck_amount <= 0:
        return 0.0
    return bill_amount / paycheck_amount * 100


def total_bills_amount(bills: Iterable[Bill]) -> float:
    """Sum of the raw amounts of active bills."""
    return float(sum(bill.amount for bill in bills if bill.is_active))


def total_account_percentage(accounts: Iterable[Account]) -> float:
    """Sum of payroll percentages across active accounts."""
    return float(sum(account.payroll_percentage for account in accounts if account.is_active))


def _category_share(accounts: Sequence[Account], category: AccountCategory, income: float) -> float:
    return sum(
        income * account.payroll_percentage / 100
        for account in accounts
        if account.category is category
    )


def summarize(
    accounts: Sequence[Account],
    bills: Sequence[Bill],
    settings: StewardshipSettings,
    as_of: Optional[date] = None,
) -> FinancialSummary:
    """Summarize the current month's income and its allocation.

    Args:
        accounts: All accounts; inactive accounts are ignored
        bills: All bills; inactive bills are ignored
        settings: Pay settings, including any explicit pay dates
        as_of: Day within the month to summarize; defaults to today

    Returns:
        :class:`FinancialSummary` for the month
    """
    active_accounts = [account for account in accounts if account.is_active]
    income = current_month_income(
        settings.paycheck_amount,
        settings.pay_frequency,
        settings.pay_dates,
        as_of=as_of,
    )
    allocated_pct = total_account_percentage(active_accounts)
    allocated = income * allocated_pct / 100

    return FinancialSummary(
        total_income=income,
        total_allocated=allocated,
        total_bills=total_bills_amount(bills),
        total_savings=_category_share(active_accounts, AccountCategory.SAVINGS, income),
        total_tithing=_category_share(active_accounts, AccountCategory.TITHING, income),
        remaining_balance=income - allocated,
        allocation_percentage=allocated_pct,
    )


def recommend(
    accounts: Sequence[Account],
    total_allocated_percentage: float,
    bills: Sequence[Bill] = (),
    settings: Optional[StewardshipSettings] = None,
) -> List[Recommendation]:
    """Generate allocation recommendations.

    The global allocation check comes first, followed by one warning per
    account whose bills use more than 90% of its inflow.  Utilization is
    only evaluated when ``settings`` is supplied.
    """
    recommendations: List[Recommendation] = []
    total = total_allocated_percentage

    if total > config.OVER_ALLOCATED_PERCENT:
        recommendations.append(Recommendation(
            severity='error',
            message=f"Your budget exceeds 100% by {format_percentage(total - 100)}. You need to reduce allocations.",
            action='Reduce account percentages or increase income',
        ))
    elif total > config.BUFFER_WARNING_PERCENT:
        recommendations.append(Recommendation(
            severity='warning',
            message=f"Budget uses {format_percentage(total)} of income. Consider leaving more buffer.",
            action='Reduce some account percentages to leave 5-10% buffer',
        ))

    if total < config.UNDER_ALLOCATED_PERCENT:
        recommendations.append(Recommendation(
            severity='suggestion',
            message=f"You have {format_percentage(100 - total)} unallocated income.",
            action='Consider increasing savings, emergency fund, or debt payments',
        ))

    if settings is not None:
        for info in project_balances(accounts, bills, settings):
            if info.utilization > config.HIGH_UTILIZATION_PERCENT:
                recommendations.append(Recommendation(
                    severity='warning',
                    message=f"{info.account_name} account is over 90% utilized.",
                    action='Consider increasing allocation or reducing bills in this account',
                ))

    return recommendations


def validate_balance(
    accounts: Sequence[Account],
    settings: Optional[StewardshipSettings] = None,
) -> BudgetValidation:
    """Single pass/fail gate on the total allocation.

    Only an allocation above 100% is invalid; 95-100% passes with a
    buffer warning in the message.
    """
    total = total_account_percentage(accounts)

    if total > config.OVER_ALLOCATED_PERCENT:
        return BudgetValidation(
            is_valid=False,
            total_percentage=total,
            message=f"Budget exceeds 100% by {format_percentage(total - 100)}. Please reduce allocations.",
        )
    if total > config.BUFFER_WARNING_PERCENT:
        return BudgetValidation(
            is_valid=True,
            total_percentage=total,
            message=f"Budget uses {format_percentage(total)} of income. Consider leaving more buffer.",
        )
    return BudgetValidation(
        is_valid=True,
        total_percentage=total,
        message=(
            f"Budget looks good! Using {format_percentage(total)} "
            f"with {format_percentage(100 - total)} remaining."
        ),
    )


def optimal_percentages(bills: Sequence[Bill], settings: StewardshipSettings) -> List[Allocation]:
    """Suggested paycheck split: tithing, emergency fund, then each bill.

    Bill shares are per paycheck, so the list may total more than 100% when
    bills outweigh a single paycheck.
    """
    allocations: List[Allocation] = []
    if settings.tithing_enabled:
        allocations.append(Allocation(account_id='tithing', percentage=settings.tithing_percentage))
    allocations.append(Allocation(account_id='emergency', percentage=settings.emergency_fund_percentage))

    for bill in bills:
        if not bill.is_active:
            continue
        allocations.append(Allocation(
            account_id=bill.account_id,
            percentage=calculate_bill_percentage(bill.amount, settings.paycheck_amount),
        ))
    return allocations


ACCOUNT_BREAKDOWN_GROUPS = {
    AccountCategory.SAVINGS: 'Additional Savings',
    AccountCategory.EXPENSES: 'Monthly Expenses',
    AccountCategory.DEBT: 'Debt Payments',
}


def _breakdown_group(category: str, items: List[BreakdownItem], total_percentage: float) -> PaycheckBreakdown:
    return PaycheckBreakdown(
        category=category,
        items=tuple(items),
        total_amount=sum(item.amount for item in items),
        total_percentage=total_percentage,
    )


def paycheck_breakdown(
    accounts: Sequence[Account],
    bills: Sequence[Bill],
    settings: StewardshipSettings,
) -> List[PaycheckBreakdown]:
    """Split a single paycheck into giving, savings, bills and account groups.

    Groups come in a fixed order: tithing (when enabled), the emergency
    fund, one group per bill category in order of first appearance, then
    one group per account category.  Tithing accounts are left out of the
    account groups since tithing already has its own group.  Amounts are
    per paycheck, and percentages are of one paycheck.

    Args:
        accounts: All accounts; inactive accounts are ignored
        bills: All bills; inactive bills are ignored
        settings: Pay settings supplying the paycheck amount

    Returns:
        List of :class:`PaycheckBreakdown` groups
    """
    paycheck = settings.paycheck_amount
    groups: List[PaycheckBreakdown] = []

    if settings.tithing_enabled:
        item = BreakdownItem('Tithing/Giving', paycheck * settings.tithing_percentage / 100, settings.tithing_percentage)
        groups.append(_breakdown_group('Honor God First', [item], settings.tithing_percentage))

    item = BreakdownItem(
        'Emergency Fund/Savings',
        paycheck * settings.emergency_fund_percentage / 100,
        settings.emergency_fund_percentage,
    )
    groups.append(_breakdown_group('Pay Yourself Second', [item], settings.emergency_fund_percentage))

    bills_by_category: Dict[str, List[Bill]] = {}
    for bill in bills:
        if bill.is_active:
            bills_by_category.setdefault(bill.category or 'Other Bills', []).append(bill)
    for category, category_bills in bills_by_category.items():
        items = [
            BreakdownItem(bill.name, bill.amount, calculate_bill_percentage(bill.amount, paycheck))
            for bill in category_bills
        ]
        total = sum(bill.amount for bill in category_bills)
        groups.append(_breakdown_group(f"{category} Bills", items, calculate_bill_percentage(total, paycheck)))

    accounts_by_group: Dict[str, List[Account]] = {}
    for account in accounts:
        if not account.is_active or account.category is AccountCategory.TITHING:
            continue
        label = ACCOUNT_BREAKDOWN_GROUPS.get(account.category, 'Other Accounts')
        accounts_by_group.setdefault(label, []).append(account)
    for label, group_accounts in accounts_by_group.items():
        items = [
            BreakdownItem(account.nickname, paycheck * account.payroll_percentage / 100, account.payroll_percentage)
            for account in group_accounts
        ]
        groups.append(_breakdown_group(label, items, sum(item.percentage for item in items)))

    return groups


def _name_has(bill: Bill, keywords: Tuple[str, ...]) -> bool:
    name = bill.name.lower()
    return any(keyword in name for keyword in keywords)


def classify_bills(bills: Iterable[Bill]) -> Dict[str, List[Bill]]:
    """Group active bills by how negotiable they are.

    A bill can land in more than one group, e.g. a gym membership filed
    under ``Health`` is both lifestyle and negotiable.
    """
    groups: Dict[str, List[Bill]] = {'non-negotiable': [], 'negotiable': [], 'lifestyle': []}
    for bill in bills:
        if not bill.is_active:
            continue
        if bill.category in NON_NEGOTIABLE_CATEGORIES and not _name_has(bill, DISCRETIONARY_NAME_KEYWORDS):
            groups['non-negotiable'].append(bill)
        if bill.category in NEGOTIABLE_CATEGORIES or _name_has(bill, SUBSCRIPTION_NAME_KEYWORDS):
            groups['negotiable'].append(bill)
        if bill.category in LIFESTYLE_CATEGORIES and not _name_has(bill, STAPLE_NAME_KEYWORDS):
            groups['lifestyle'].append(bill)
    return groups


def debt_reduction_suggestions(
    bills: Sequence[Bill],
    settings: StewardshipSettings,
) -> List[DebtReductionSuggestion]:
    """Suggest where bills can be trimmed to free money for debt payoff.

    Args:
        bills: All bills; inactive bills are ignored
        settings: Pay settings used to estimate monthly income

    Returns:
        Suggestions ordered by priority (0 = most urgent)
    """
    monthly_income = normalize_to_monthly(settings.paycheck_amount, settings.pay_frequency)
    groups = classify_bills(bills)
    suggestions: List[DebtReductionSuggestion] = []

    essentials = groups['non-negotiable']
    if essentials:
        total = sum(bill.amount for bill in essentials)
        share = total / monthly_income * 100 if monthly_income > 0 else 0.0
        first_tip = (
            'Consider refinancing or downsizing to reduce housing costs'
            if share > 50
            else 'Shop around for better insurance rates annually'
        )
        suggestions.append(DebtReductionSuggestion(
            category='Essential Expenses (Non-Negotiable)',
            kind='non-negotiable',
            total_amount=total,
            bills=tuple(bill.name for bill in essentials),
            suggestions=(first_tip,) + NON_NEGOTIABLE_TIPS,
            potential_savings=min(total * 0.15, 200.0),
            priority=3,
        ))

    negotiable = groups['negotiable']
    if negotiable:
        total = sum(bill.amount for bill in negotiable)
        suggestions.append(DebtReductionSuggestion(
            category='Entertainment & Subscriptions (Negotiable)',
            kind='negotiable',
            total_amount=total,
            bills=tuple(bill.name for bill in negotiable),
            suggestions=NEGOTIABLE_TIPS,
            potential_savings=min(total * 0.70, 300.0),
            priority=1,
        ))

    lifestyle = groups['lifestyle']
    if lifestyle:
        total = sum(bill.amount for bill in lifestyle)
        suggestions.append(DebtReductionSuggestion(
            category='Lifestyle & Personal (Partially Negotiable)',
            kind='lifestyle',
            total_amount=total,
            bills=tuple(bill.name for bill in lifestyle),
            suggestions=LIFESTYLE_TIPS,
            potential_savings=min(total * 0.40, 250.0),
            priority=2,
        ))

    total_bills = total_bills_amount(bills)
    expense_ratio = total_bills / monthly_income * 100 if monthly_income > 0 else 0.0
    if expense_ratio > config.HIGH_EXPENSE_RATIO_PERCENT:
        suggestions.insert(0, DebtReductionSuggestion(
            category='High Expense Alert',
            kind='non-negotiable',
            total_amount=total_bills,
            bills=('Total monthly expenses',),
            suggestions=HIGH_EXPENSE_TIPS,
            potential_savings=total_bills * 0.20,
            priority=0,
        ))

    return sorted(suggestions, key=lambda suggestion: suggestion.priority)
