"""Solve for the interest rate implied by a loan's principal, payment and term."""

import math
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from .amortization import calculate_payment
from .config import DEFAULT_RATE_GUESS_PCT, DEFAULT_SOLVER_SETTINGS, PERIODS_PER_YEAR, SolverSettings
from .validation import require_finite, require_positive


@dataclass
class RateSolution:
    """Result of a rate solve."""

    rate: float  # annual percent, e.g. 6.5 for 6.5%
    periodic_rate: float  # monthly fraction
    converged: bool  # False means best-effort estimate
    iterations: int


def payment_residual(rate: float, num_periods: float, principal: float, payment: float) -> float:
    """Difference between the actual payment and the one ``rate`` would require."""
    return payment - calculate_payment(principal, rate, num_periods)


def solve_rate(
    num_periods: float,
    principal: float,
    payment: float,
    initial_guess_pct: float = DEFAULT_RATE_GUESS_PCT,
    settings: Optional[SolverSettings] = None,
) -> RateSolution:
    """Find the annual rate at which ``payment`` retires ``principal`` in ``num_periods``.

    Newton-Raphson on the payment residual, using a central-difference
    derivative. The periodic rate is clamped to [min_rate, max_rate] after
    every step. Iteration stops when the residual falls under the tolerance,
    when the residual curve is too flat to make progress, or after
    ``max_iterations`` steps. In the last two cases the current estimate is
    still returned, with ``converged`` set only if the residual test passed.

    Args:
        num_periods: Number of monthly payments
        principal: Loan amount
        payment: Monthly payment
        initial_guess_pct: Starting annual rate in percent
        settings: Solver tolerances, defaults to DEFAULT_SOLVER_SETTINGS

    Returns:
        RateSolution with the annual percentage rate
    """
    settings = settings or DEFAULT_SOLVER_SETTINGS
    num_periods = require_positive("num_periods", num_periods)
    principal = require_positive("principal", principal)
    payment = require_positive("payment", payment)
    initial_guess_pct = require_finite("initial_guess_pct", initial_guess_pct)

    def clamp(value: float) -> float:
        return min(settings.max_rate, max(settings.min_rate, value))

    def residual(value: float) -> float:
        return payment_residual(value, num_periods, principal, payment)

    rate = clamp(initial_guess_pct / 100 / PERIODS_PER_YEAR)
    h = settings.derivative_epsilon
    converged = False
    iterations = 0

    while True:
        f = residual(rate)
        if abs(f) < settings.tolerance:
            converged = True
            break
        if iterations >= settings.max_iterations:
            break

        derivative = (residual(rate + h) - residual(rate - h)) / (2 * h)
        if not math.isfinite(derivative) or abs(derivative) < settings.min_derivative:
            logger.debug(f"Rate solver stopped on a flat residual at r={rate:.10f}")
            break

        rate = clamp(rate - f / derivative)
        iterations += 1

    annual_pct = rate * PERIODS_PER_YEAR * 100

    if converged:
        logger.debug(f"Rate solver converged to {annual_pct:.6f}% in {iterations} iterations")
    else:
        logger.warning(
            f"Rate solver did not converge after {iterations} iterations "
            f"(n={num_periods:g}, P={principal:,.2f}, PMT={payment:,.2f}); "
            f"returning best estimate {annual_pct:.6f}%"
        )

    return RateSolution(
        rate=annual_pct,
        periodic_rate=rate,
        converged=converged,
        iterations=iterations,
    )
