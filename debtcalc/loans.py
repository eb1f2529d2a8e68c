"""Single-loan calculators: loan summary, missing loan value, payoff goal."""

import math
from datetime import date
from typing import Optional

from .amortization import (
    Loan,
    calculate_payment,
    monthly_rate_from_apr,
    periods_from_payment,
    principal_from_payment,
)
from .config import DEFAULT_RATE_GUESS_PCT, PERIODS_PER_YEAR
from .errors import InvalidInput, InvalidSchedule
from .formatting import round_number
from .rate_solver import solve_rate
from .sanitize import sanitize_number
from .validation import require_non_negative, require_positive

LOAN_FIELDS = ('principal', 'annual_rate_pct', 'num_payments', 'payment')


def loan_summary(principal: float, annual_rate_pct: float, years: float) -> dict:
    """Monthly payment and total cost of a loan.

    Args:
        principal: Amount borrowed
        annual_rate_pct: APR in percent (7.5 for 7.5%)
        years: Loan term in years, converted to monthly payments

    Returns:
        Dictionary with monthly payment, number of payments, total paid and
        total interest
    """
    principal = require_positive("principal", principal)
    annual_rate_pct = require_non_negative("annual_rate_pct", annual_rate_pct)
    years = require_positive("years", years)

    months = years * PERIODS_PER_YEAR
    monthly_rate = monthly_rate_from_apr(annual_rate_pct)

    if monthly_rate < 1e-10:
        # No interest (or too little to matter)
        monthly_payment = principal / months
    else:
        monthly_payment = calculate_payment(principal, monthly_rate, months)

    if not math.isfinite(monthly_payment) or monthly_payment <= 0:
        raise InvalidSchedule("The calculation did not produce a valid payment. Please check your inputs.")

    num_payments = int(math.floor(months + 0.5))
    total_paid = monthly_payment * num_payments

    return {
        'monthly_payment': round(monthly_payment, 2),
        'num_payments': num_payments,
        'total_paid': round(total_paid, 2),
        'total_interest': round(total_paid - principal, 2),
    }


def _read_field(value) -> Optional[float]:
    """None for a blank entry, otherwise the sanitized number."""
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        return sanitize_number(value)
    return value


def solve_missing_value(
    principal=None,
    annual_rate_pct=None,
    num_payments=None,
    payment=None,
    initial_guess_pct: float = DEFAULT_RATE_GUESS_PCT,
) -> dict:
    """Fill in whichever of the four loan values was left blank.

    Values may be numbers or raw form text ("$12,000"); None or a blank
    string marks the value to solve for. Exactly one must be blank.

    Returns:
        Dictionary with the solved 'field', its rounded 'value' and
        'converged' (always True except for an unconverged rate solve)
    """
    values = {
        'principal': _read_field(principal),
        'annual_rate_pct': _read_field(annual_rate_pct),
        'num_payments': _read_field(num_payments),
        'payment': _read_field(payment),
    }

    missing = [name for name in LOAN_FIELDS if values[name] is None]
    if len(missing) != 1:
        raise InvalidInput(
            "loan values",
            len(LOAN_FIELDS) - len(missing),
            "must leave exactly one of principal, rate, number of payments and payment blank",
        )

    for name in LOAN_FIELDS:
        if values[name] is not None:
            values[name] = require_positive(name, values[name])

    field = missing[0]
    p = values['principal']
    n = values['num_payments']
    pmt = values['payment']
    apr = values['annual_rate_pct']
    r = monthly_rate_from_apr(apr) if apr is not None else None
    converged = True

    if field == 'payment':
        value = round_number(calculate_payment(p, r, n), 2)
    elif field == 'principal':
        value = round_number(principal_from_payment(pmt, r, n), 2)
    elif field == 'num_payments':
        value = round_number(periods_from_payment(p, r, pmt), 0)
        if value is not None:
            value = int(value)
    else:
        solution = solve_rate(n, p, pmt, initial_guess_pct)
        value = round_number(solution.rate, 4)
        converged = solution.converged

    if value is None:
        raise InvalidSchedule(f"Could not compute a finite {field} from the values entered.")

    return {'field': field, 'value': value, 'converged': converged}


def months_until(goal_month: int, goal_year: int, today: Optional[date] = None) -> int:
    """Whole months from the current month to the goal month."""
    today = today or date.today()
    return (goal_year * 12 + goal_month) - (today.year * 12 + today.month)


def payoff_goal(
    balance: float,
    annual_rate_pct: float,
    goal_month: int,
    goal_year: int,
    today: Optional[date] = None,
) -> dict:
    """Monthly payment needed to clear ``balance`` by the goal month.

    Args:
        balance: Current balance owed
        annual_rate_pct: APR in percent
        goal_month: Target month, 1-12
        goal_year: Target year
        today: Reference date, defaults to today

    Returns:
        Dictionary with months until payoff, required payment and interest cost
    """
    balance = require_positive("balance", balance)
    annual_rate_pct = require_non_negative("annual_rate_pct", annual_rate_pct)
    if not 1 <= goal_month <= 12:
        raise InvalidInput("goal_month", goal_month, "must be between 1 and 12")

    months = months_until(goal_month, goal_year, today)
    if months <= 0:
        raise InvalidInput("goal date", f"{goal_year}-{goal_month:02d}", "must be after the current month")

    loan = Loan(principal=balance, annual_rate=annual_rate_pct / 100, term_months=months)
    payment = loan.monthly_payment
    if not math.isfinite(payment) or payment <= 0:
        raise InvalidSchedule("The calculation did not produce a valid payment. Please check your inputs.")

    return {
        'goal': f"{goal_year}-{goal_month:02d}",
        'months': months,
        'monthly_payment': round(payment, 2),
        'total_interest': round(loan.total_interest, 2),
        'schedule': loan.amortization_schedule(),
    }
