"""Conversion of recurring amounts to monthly equivalents."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Union

from .models import Frequency, parse_date

FrequencyLike = Union[Frequency, str]

# Number of occurrences of each frequency in a year.
PERIODS_PER_YEAR: Dict[Frequency, float] = {
    Frequency.WEEKLY: 52.0,
    Frequency.BI_WEEKLY: 26.0,
    Frequency.SEMI_MONTHLY: 24.0,
    Frequency.MONTHLY: 12.0,
    Frequency.QUARTERLY: 4.0,
    Frequency.ANNUAL: 1.0,
}


def normalize_to_monthly(amount: float, frequency: FrequencyLike) -> float:
    """Convert ``amount`` paid at ``frequency`` into its monthly equivalent.

    Args:
        amount: Amount of a single occurrence
        frequency: A :class:`Frequency` member or its string tag

    Returns:
        Monthly-equivalent amount

    Raises:
        InvalidFrequency: If ``frequency`` is not a known tag

    Example:
        >>> normalize_to_monthly(1500, 'bi-weekly')
        3250.0
    """
    freq = Frequency.parse(frequency)
    if freq is Frequency.WEEKLY:
        return amount * 52 / 12
    if freq is Frequency.BI_WEEKLY:
        return amount * 26 / 12
    if freq is Frequency.SEMI_MONTHLY:
        return amount * 2
    if freq is Frequency.MONTHLY:
        return float(amount)
    if freq is Frequency.QUARTERLY:
        return amount / 3
    return amount / 12


def annualize(amount: float, frequency: FrequencyLike) -> float:
    """Total paid over a year for ``amount`` recurring at ``frequency``."""
    return amount * PERIODS_PER_YEAR[Frequency.parse(frequency)]


def from_monthly(monthly_amount: float, frequency: FrequencyLike) -> float:
    """Per-occurrence amount that sums to ``monthly_amount`` each month."""
    return monthly_amount * 12 / PERIODS_PER_YEAR[Frequency.parse(frequency)]


def paychecks_in_month(pay_dates: Iterable[Union[date, str]], year: int, month: int) -> int:
    """Count the explicit pay dates landing in the given calendar month."""
    count = 0
    for value in pay_dates:
        pay_date = parse_date(value)
        if pay_date is not None and pay_date.year == year and pay_date.month == month:
            count += 1
    return count


def current_month_income(
    paycheck_amount: float,
    frequency: FrequencyLike,
    pay_dates: Optional[Iterable[Union[date, str]]] = None,
    as_of: Optional[date] = None,
) -> float:
    """Income for the calendar month containing ``as_of``.

    When an explicit pay schedule is known the paychecks in that month are
    counted exactly, so a bi-weekly earner sees the months with three
    paychecks.  Without a schedule the frequency average is used.

    Args:
        paycheck_amount: Amount of a single paycheck
        frequency: Pay frequency, used only when ``pay_dates`` is empty
        pay_dates: Upcoming pay dates (``date`` objects or ISO strings)
        as_of: Any day in the month of interest; defaults to today

    Returns:
        Income for the month
    """
    dates = list(pay_dates or [])
    if not dates:
        return normalize_to_monthly(paycheck_amount, frequency)
    reference = as_of or date.today()
    return paycheck_amount * paychecks_in_month(dates, reference.year, reference.month)
