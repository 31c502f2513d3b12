"""Record types shared by the calculation modules and the data store.

Entities are immutable snapshots supplied by the storage layer; the result
records are plain data handed to the presentation layer.  Every entity can be
built from the camelCase JSON of the browser local-storage format
(``from_dict``) and serialized back (``to_dict``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .errors import InvalidFrequency


class AccountCategory(str, Enum):
    TITHING = 'tithing'
    SAVINGS = 'savings'
    BILLS = 'bills'
    EXPENSES = 'expenses'
    DEBT = 'debt'


class Frequency(str, Enum):
    WEEKLY = 'weekly'
    BI_WEEKLY = 'bi-weekly'
    SEMI_MONTHLY = 'semi-monthly'
    MONTHLY = 'monthly'
    QUARTERLY = 'quarterly'
    ANNUAL = 'annual'

    @classmethod
    def parse(cls, value: Any, allowed: Optional[FrozenSet['Frequency']] = None) -> 'Frequency':
        """Return the member for ``value`` or raise :class:`InvalidFrequency`."""
        choices = allowed or frozenset(cls)
        if isinstance(value, cls):
            member = value
        elif isinstance(value, str):
            try:
                member = cls(value.strip().lower())
            except ValueError:
                raise InvalidFrequency(value, sorted(c.value for c in choices)) from None
        else:
            raise InvalidFrequency(value, sorted(c.value for c in choices))
        if member not in choices:
            raise InvalidFrequency(value, sorted(c.value for c in choices))
        return member


BILL_FREQUENCIES: FrozenSet[Frequency] = frozenset({
    Frequency.WEEKLY,
    Frequency.BI_WEEKLY,
    Frequency.MONTHLY,
    Frequency.QUARTERLY,
    Frequency.ANNUAL,
})
PAY_FREQUENCIES: FrozenSet[Frequency] = frozenset({
    Frequency.WEEKLY,
    Frequency.BI_WEEKLY,
    Frequency.SEMI_MONTHLY,
    Frequency.MONTHLY,
})


class BillStatus(str, Enum):
    CURRENT = 'current'
    BEHIND = 'behind'
    AHEAD = 'ahead'


class DebtStrategy(str, Enum):
    SNOWBALL = 'snowball'
    AVALANCHE = 'avalanche'

    @property
    def display_name(self) -> str:
        return 'Debt Snowball' if self is DebtStrategy.SNOWBALL else 'Debt Avalanche'


class EventType(str, Enum):
    PAYCHECK = 'paycheck'
    BILL = 'bill'
    GOAL_MILESTONE = 'goal_milestone'
    DEBT_PAYMENT = 'debt_payment'


class EventStatus(str, Enum):
    UPCOMING = 'upcoming'
    PAID = 'paid'
    OVERDUE = 'overdue'
    COMPLETED = 'completed'


class GoalType(str, Enum):
    EMERGENCY = 'emergency'
    HOUSE = 'house'
    VACATION = 'vacation'
    WEDDING = 'wedding'
    CAR = 'car'
    EDUCATION = 'education'
    RETIREMENT = 'retirement'
    CUSTOM = 'custom'


def parse_date(value: Any) -> Optional[date]:
    """Coerce an ISO string, ``datetime`` or ``date`` into a ``date``."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Cannot interpret {value!r} as a date")


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Account:
    id: str
    nickname: str
    category: AccountCategory
    payroll_percentage: float
    current_balance: float = 0.0
    is_active: bool = True
    bank_name: str = ''
    account_type: str = 'checking'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Account':
        return cls(
            id=str(data['id']),
            nickname=str(_pick(data, 'nickname', 'name', default='')),
            category=AccountCategory(_pick(data, 'category', default='expenses')),
            payroll_percentage=float(_pick(data, 'payrollPercentage', 'payroll_percentage', default=0.0)),
            current_balance=float(_pick(data, 'currentBalance', 'current_balance', default=0.0)),
            is_active=bool(_pick(data, 'isActive', 'is_active', default=True)),
            bank_name=str(_pick(data, 'bankName', 'bank_name', default='')),
            account_type=str(_pick(data, 'accountType', 'account_type', default='checking')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'nickname': self.nickname,
            'category': self.category.value,
            'payrollPercentage': self.payroll_percentage,
            'currentBalance': self.current_balance,
            'isActive': self.is_active,
            'bankName': self.bank_name,
            'accountType': self.account_type,
        }


@dataclass(frozen=True)
class Bill:
    id: str
    name: str
    amount: float
    frequency: Frequency
    due_date: date
    account_id: Optional[str] = None
    is_active: bool = True
    status: BillStatus = BillStatus.CURRENT
    category: str = ''
    amount_behind: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, 'frequency', Frequency.parse(self.frequency, BILL_FREQUENCIES))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Bill':
        return cls(
            id=str(data['id']),
            name=str(_pick(data, 'name', default='')),
            amount=float(_pick(data, 'amount', default=0.0)),
            frequency=_pick(data, 'frequency', default='monthly'),
            due_date=parse_date(_pick(data, 'dueDate', 'due_date')),
            account_id=_pick(data, 'accountId', 'account_id') or None,
            is_active=bool(_pick(data, 'isActive', 'is_active', default=True)),
            status=BillStatus(_pick(data, 'status', default='current')),
            category=str(_pick(data, 'category', default='')),
            amount_behind=float(_pick(data, 'amountBehind', 'amount_behind', default=0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'frequency': self.frequency.value,
            'dueDate': _iso(self.due_date),
            'accountId': self.account_id,
            'isActive': self.is_active,
            'status': self.status.value,
            'category': self.category,
            'amountBehind': self.amount_behind,
        }


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    current_balance: float
    minimum_payment: float
    interest_rate: float
    account_id: Optional[str] = None
    due_date: Optional[date] = None
    is_active: bool = True

    @property
    def monthly_interest(self) -> float:
        return self.current_balance * self.interest_rate / 1200

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Debt':
        return cls(
            id=str(data['id']),
            name=str(_pick(data, 'name', default='')),
            current_balance=float(_pick(data, 'currentBalance', 'current_balance', default=0.0)),
            minimum_payment=float(_pick(data, 'minimumPayment', 'minimum_payment', default=0.0)),
            interest_rate=float(_pick(data, 'interestRate', 'interest_rate', default=0.0)),
            account_id=_pick(data, 'accountId', 'account_id') or None,
            due_date=parse_date(_pick(data, 'dueDate', 'due_date')),
            is_active=bool(_pick(data, 'isActive', 'is_active', default=True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'currentBalance': self.current_balance,
            'minimumPayment': self.minimum_payment,
            'interestRate': self.interest_rate,
            'accountId': self.account_id,
            'dueDate': _iso(self.due_date),
            'isActive': self.is_active,
        }


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: date
    monthly_contribution: float = 0.0
    priority: int = 3
    goal_type: GoalType = GoalType.CUSTOM
    account_id: Optional[str] = None
    is_active: bool = True
    description: str = ''

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SavingsGoal':
        target_date = parse_date(_pick(data, 'targetDate', 'target_date'))
        if target_date is None:
            raise ValueError(f"Goal {data.get('id')!r} has no target date")
        return cls(
            id=str(data['id']),
            name=str(_pick(data, 'name', default='')),
            target_amount=float(_pick(data, 'targetAmount', 'target_amount', default=0.0)),
            current_amount=float(_pick(data, 'currentAmount', 'current_amount', default=0.0)),
            target_date=target_date,
            monthly_contribution=float(_pick(data, 'monthlyContribution', 'monthly_contribution', default=0.0)),
            priority=int(_pick(data, 'priority', default=3)),
            goal_type=GoalType(_pick(data, 'type', 'goal_type', default='custom')),
            account_id=_pick(data, 'accountId', 'account_id') or None,
            is_active=bool(_pick(data, 'isActive', 'is_active', default=True)),
            description=str(_pick(data, 'description', default='')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.goal_type.value,
            'targetAmount': self.target_amount,
            'currentAmount': self.current_amount,
            'targetDate': _iso(self.target_date),
            'monthlyContribution': self.monthly_contribution,
            'accountId': self.account_id,
            'priority': self.priority,
            'isActive': self.is_active,
            'description': self.description,
        }


@dataclass(frozen=True)
class StewardshipSettings:
    paycheck_amount: float
    pay_frequency: Frequency = Frequency.BI_WEEKLY
    tithing_enabled: bool = False
    tithing_percentage: float = 10.0
    emergency_fund_percentage: float = 5.0
    pay_dates: Tuple[date, ...] = ()
    faith_based_mode: bool = False
    next_pay_date: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'pay_frequency', Frequency.parse(self.pay_frequency, PAY_FREQUENCIES))
        # Blank entries in a stored schedule are dropped.
        parsed = (parse_date(d) for d in self.pay_dates)
        object.__setattr__(self, 'pay_dates', tuple(d for d in parsed if d is not None))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'StewardshipSettings':
        return cls(
            paycheck_amount=float(_pick(data, 'paycheckAmount', 'paycheck_amount', default=0.0)),
            pay_frequency=_pick(data, 'payFrequency', 'pay_frequency', default='bi-weekly'),
            tithing_enabled=bool(_pick(data, 'tithingEnabled', 'tithing_enabled', default=False)),
            tithing_percentage=float(_pick(data, 'tithingPercentage', 'tithing_percentage', default=10.0)),
            emergency_fund_percentage=float(
                _pick(data, 'emergencyFundPercentage', 'emergency_fund_percentage', default=5.0)
            ),
            pay_dates=tuple(_pick(data, 'payDates', 'pay_dates', default=()) or ()),
            faith_based_mode=bool(_pick(data, 'faithBasedMode', 'faith_based_mode', default=False)),
            next_pay_date=parse_date(_pick(data, 'nextPayDate', 'next_pay_date')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'paycheckAmount': self.paycheck_amount,
            'payFrequency': self.pay_frequency.value,
            'tithingEnabled': self.tithing_enabled,
            'tithingPercentage': self.tithing_percentage,
            'emergencyFundPercentage': self.emergency_fund_percentage,
            'payDates': [d.isoformat() for d in self.pay_dates],
            'faithBasedMode': self.faith_based_mode,
            'nextPayDate': _iso(self.next_pay_date),
        }


@dataclass(frozen=True)
class EventKey:
    """Composite identity of a calendar occurrence."""

    kind: EventType
    entity_id: Optional[str]
    occurrence: date

    def __str__(self) -> str:
        parts = [self.kind.value]
        if self.entity_id is not None:
            parts.append(self.entity_id)
        parts.append(self.occurrence.isoformat())
        return '_'.join(parts)


@dataclass(frozen=True)
class CalendarEvent:
    key: EventKey
    title: str
    date: date
    event_type: EventType
    status: EventStatus
    amount: Optional[float] = None
    related_id: Optional[str] = None
    category: Optional[str] = None

    @property
    def id(self) -> str:
        return str(self.key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date.isoformat(),
            'type': self.event_type.value,
            'amount': self.amount,
            'status': self.status.value,
            'relatedId': self.related_id,
            'category': self.category,
        }


# Result records -----------------------------------------------------------

@dataclass(frozen=True)
class FinancialSummary:
    total_income: float
    total_allocated: float
    total_bills: float
    total_savings: float
    total_tithing: float
    remaining_balance: float
    allocation_percentage: float


@dataclass(frozen=True)
class Recommendation:
    severity: str  # 'error' | 'warning' | 'suggestion'
    message: str
    action: Optional[str] = None


@dataclass(frozen=True)
class BudgetValidation:
    is_valid: bool
    total_percentage: float
    message: str


@dataclass(frozen=True)
class Allocation:
    account_id: Optional[str]
    percentage: float


@dataclass(frozen=True)
class DebtReductionSuggestion:
    category: str
    kind: str  # 'negotiable' | 'non-negotiable' | 'lifestyle'
    total_amount: float
    bills: Tuple[str, ...]
    suggestions: Tuple[str, ...]
    potential_savings: float
    priority: int


@dataclass(frozen=True)
class AccountBalanceInfo:
    account_id: str
    account_name: str
    starting_balance: float
    monthly_inflow: float
    monthly_outflow: float
    ending_balance: float
    bills_count: int
    utilization: float


@dataclass(frozen=True)
class MonthlyPayment:
    debt_id: str
    payment: float


@dataclass(frozen=True)
class TimelineEntry:
    month: int
    debt_id: str
    remaining_balance: float


@dataclass(frozen=True)
class DebtPayoffStrategy:
    strategy_name: str
    total_interest: float
    payoff_time_months: int
    monthly_payments: List[MonthlyPayment] = field(default_factory=list)
    timeline: List[TimelineEntry] = field(default_factory=list)

    def payoff_month(self, debt_id: str) -> Optional[int]:
        """First simulated month in which ``debt_id`` reached a zero balance."""
        for entry in self.timeline:
            if entry.debt_id == debt_id and entry.remaining_balance <= 0:
                return entry.month
        return None

    def payoff_order(self) -> List[str]:
        """Debt ids in the order their balances reached zero."""
        months: Dict[str, int] = {}
        for entry in self.timeline:
            if entry.remaining_balance <= 0 and entry.debt_id not in months:
                months[entry.debt_id] = entry.month
        return sorted(months, key=months.__getitem__)


@dataclass(frozen=True)
class ExtraPaymentImpact:
    interest_saved: float
    months_saved: int
    new_payoff_months: int


@dataclass(frozen=True)
class StrategyComparison:
    snowball: DebtPayoffStrategy
    avalanche: DebtPayoffStrategy
    interest_saved: float
    months_difference: int
    recommended: DebtStrategy
    message: str = ''


@dataclass(frozen=True)
class GoalProgress:
    progress_percentage: float
    months_remaining: int
    on_track: bool
    required_monthly_contribution: Optional[float] = None


@dataclass(frozen=True)
class GoalProjection:
    achieved: bool
    months_to_complete: Optional[int]
    completion_date: Optional[date]


@dataclass(frozen=True)
class BreakdownItem:
    name: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class PaycheckBreakdown:
    """One group of the per-paycheck split, e.g. all housing bills."""

    category: str
    items: Tuple[BreakdownItem, ...]
    total_amount: float
    total_percentage: float
