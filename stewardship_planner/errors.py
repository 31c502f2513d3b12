"""Exception types raised by the stewardship calculations."""

from __future__ import annotations

from typing import Any, Optional


class StewardshipError(Exception):
    """Base class for all planner errors."""


class InvalidFrequency(StewardshipError, ValueError):
    """Raised when an amount is tagged with an unknown recurrence frequency."""

    def __init__(self, value: Any, allowed: Optional[Any] = None):
        self.value = value
        self.allowed = tuple(allowed) if allowed is not None else ()
        message = f"Unrecognized frequency: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(str(a) for a in self.allowed)})"
        super().__init__(message)


class UnpayableDebt(StewardshipError, ValueError):
    """Raised when a payment never covers the interest accruing on a balance.

    The closed-form payoff is undefined in that case and a month-by-month
    simulation would never reach a zero balance.
    """

    def __init__(
        self,
        balance: float,
        payment: float,
        rate: float,
        debt_id: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.balance = balance
        self.payment = payment
        self.rate = rate
        self.debt_id = debt_id
        monthly_interest = balance * rate / 1200
        label = f"Debt '{debt_id}'" if debt_id else 'Debt'
        message = reason or (
            f"{label} cannot be paid off: payment ${payment:,.2f} does not exceed "
            f"monthly interest ${monthly_interest:,.2f} on balance ${balance:,.2f}"
        )
        super().__init__(message)


class StorageError(StewardshipError, OSError):
    """Raised when the local data store cannot be written."""
