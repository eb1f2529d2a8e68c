"""Month-by-month payoff of a single debt at a fixed payment."""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .config import DEFAULT_LIMITS, SimulationLimits
from .errors import RunawayIteration
from .validation import require_non_negative, require_positive


@dataclass
class PayoffResult:
    """Months and interest until a debt reaches zero."""

    months: int
    total_interest: float


def simulate_payoff(
    principal: float,
    periodic_rate: float,
    payment: float,
    limits: Optional[SimulationLimits] = None,
    debt_id=None,
) -> PayoffResult:
    """Pay ``payment`` every month until the balance reaches zero.

    The final payment is not trimmed: the loop simply stops once the balance
    is at or below zero, and the interest of that month is still counted.

    Args:
        principal: Current balance
        periodic_rate: Monthly rate as a fraction (0.015 for 18% APR)
        payment: Fixed monthly payment
        limits: Runaway cutoffs, defaults to DEFAULT_LIMITS
        debt_id: Identifier reported if the debt never pays off

    Raises:
        RunawayIteration: if the balance is not cleared within
            ``limits.max_single_debt_periods`` payments.
    """
    limits = limits or DEFAULT_LIMITS
    balance = require_positive("principal", principal)
    rate = require_non_negative("periodic_rate", periodic_rate)
    payment = require_positive("payment", payment)

    total_interest = 0.0
    months = 0

    while balance > 0:
        interest = balance * rate
        total_interest += interest
        balance -= payment - interest
        months += 1

        if months >= limits.max_single_debt_periods:
            label = f"Debt #{debt_id}" if debt_id is not None else "Debt"
            logger.info(
                f"{label} never pays off: {payment:,.2f}/month against "
                f"{principal:,.2f} at {rate:.6f}/month"
            )
            raise RunawayIteration(
                limit=limits.max_single_debt_periods,
                months=months,
                total_interest=total_interest,
                debt_id=debt_id,
            )

    return PayoffResult(months=months, total_interest=total_interest)
