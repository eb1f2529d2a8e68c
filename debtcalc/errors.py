"""Error types raised by the payoff and amortization engine."""

from typing import Optional


class DebtCalcError(ValueError):
    """Base class for all calculator errors."""


class InvalidInput(DebtCalcError):
    """A required value is non-finite, negative, or zero where it must be positive."""

    def __init__(self, field: str, value, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field} {reason} (got {value!r})")


class InvalidSchedule(DebtCalcError):
    """A closed-form solve is not possible for the given terms."""


class RunawayIteration(DebtCalcError):
    """A payoff simulation hit its period cap without clearing the balance."""

    def __init__(
        self,
        limit: int,
        months: int,
        total_interest: float,
        debt_id=None,
        message: Optional[str] = None,
    ):
        self.limit = limit
        self.months = months
        self.total_interest = total_interest
        self.debt_id = debt_id
        if message is None:
            if debt_id is not None:
                message = (
                    f"At the terms entered, debt #{debt_id} will never be paid off "
                    f"(still unpaid after {months} payments)."
                )
            else:
                message = f"Payoff plan did not finish within {limit} payments."
        super().__init__(message)
