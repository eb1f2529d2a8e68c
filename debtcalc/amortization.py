"""Closed-form amortization math for fixed-rate, fully amortizing loans."""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from .config import PERIODS_PER_YEAR
from .errors import InvalidSchedule


def _growth(rate: float, periods: float) -> float:
    """(1 + rate) ** periods, overflowing to inf instead of raising."""
    with np.errstate(over="ignore"):
        return float(np.power(1.0 + rate, periods))


def calculate_payment(principal: float, rate: float, periods: float) -> float:
    """Fixed payment that retires ``principal`` over ``periods`` at periodic ``rate``.

    M = P * [r(1+r)^n] / [(1+r)^n - 1]

    Returns nan when (1+r)^n overflows.
    """
    if rate == 0:
        return principal / periods

    growth = _growth(rate, periods)
    if growth == 1.0:
        # Rate too small to register at this precision
        return principal / periods

    return principal * rate * growth / (growth - 1)


def principal_from_payment(payment: float, rate: float, periods: float) -> float:
    """Loan amount a given payment retires over ``periods``.

    P = [(1+r)^n - 1] * M / [(1+r)^n * r]
    """
    if rate == 0:
        return payment * periods

    growth = _growth(rate, periods)
    if growth == 1.0:
        return payment * periods

    return (growth - 1) * payment / (growth * rate)


def periods_from_payment(principal: float, rate: float, payment: float) -> float:
    """Number of payments needed to retire ``principal``.

    n = ln(M / (M - P*r)) / ln(1 + r)

    Raises:
        InvalidSchedule: if the payment does not exceed the first period's interest.
    """
    if rate == 0:
        if payment <= 0:
            raise InvalidSchedule("Payment must be greater than zero to pay off the loan.")
        return principal / payment

    first_interest = principal * rate
    if payment <= first_interest:
        raise InvalidSchedule(
            f"Payment of {payment:,.2f} does not cover the first month's "
            f"interest of {first_interest:,.2f}; the loan would never be paid off."
        )

    ratio = payment / (payment - first_interest)
    return math.log(ratio) / math.log1p(rate)


def monthly_rate_from_apr(apr_pct: float) -> float:
    """Convert an annual percentage rate (7.5 for 7.5%) to a monthly fraction."""
    return apr_pct / 100 / PERIODS_PER_YEAR


def normalize_annual_rate(rate: float) -> float:
    """Annual rate as a fraction, reading values of 1 or more as percents.

    18 and 0.18 both mean 18%. A rate of exactly 1 is read as 1%.
    """
    if rate >= 1:
        return rate / 100
    return rate


def amortize_month(balance: float, rate: float, payment: float) -> Tuple[float, float, float, float]:
    """Apply one month's payment to ``balance``.

    Interest accrues first, then the payment is applied. A payment that would
    take the balance below zero is trimmed to exactly what is owed and the
    difference is returned as ``excess``.

    Returns:
        Tuple of (interest, payment made, new balance, excess)
    """
    interest = balance * rate
    remaining = balance - (payment - interest)
    excess = 0.0

    if remaining <= 0:
        excess = -remaining
        payment -= excess
        remaining = 0.0

    return interest, payment, remaining, excess


@dataclass
class Loan:
    """A fixed-rate installment loan repaid in equal monthly payments."""

    principal: float
    annual_rate: float  # as decimal, e.g., 0.065 for 6.5%
    term_months: int

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / PERIODS_PER_YEAR

    @property
    def monthly_payment(self) -> float:
        return calculate_payment(self.principal, self.monthly_rate, self.term_months)

    @property
    def total_payment(self) -> float:
        return self.monthly_payment * self.term_months

    @property
    def total_interest(self) -> float:
        return self.total_payment - self.principal

    def amortization_schedule(self) -> pd.DataFrame:
        """Month-by-month split of each payment into interest and principal.

        Uses the same month step as the payoff simulators. The last payment
        is sized to clear the balance, absorbing floating-point drift, so the
        schedule always has ``term_months`` rows and ends at zero.
        """
        rows = []
        balance = self.principal
        total_interest = 0.0
        payment = self.monthly_payment

        for month in range(1, self.term_months + 1):
            if month == self.term_months:
                payment = balance * (1 + self.monthly_rate)

            interest, paid, balance, _ = amortize_month(balance, self.monthly_rate, payment)
            if month == self.term_months:
                balance = 0.0
            total_interest += interest

            rows.append({
                'month': month,
                'payment': round(paid, 2),
                'interest': round(interest, 2),
                'principal': round(paid - interest, 2),
                'balance': round(balance, 2),
                'cumulative_interest': round(total_interest, 2),
            })

        return pd.DataFrame(rows)
