"""Current plan vs accelerated payoff plan comparison."""

from typing import Iterable, Optional

import pandas as pd

from .config import SimulationLimits
from .errors import InvalidInput
from .formatting import format_number
from .payoff import simulate_payoff
from .snowball import Debt, simulate_snowball
from .validation import require_non_negative


def payoff_table(debts: Iterable[Debt], limits: Optional[SimulationLimits] = None) -> pd.DataFrame:
    """Months and interest for each debt paid on its own at its scheduled payment.

    A debt with no balance left takes 0 months and costs no interest.

    Raises:
        RunawayIteration: naming the first debt that never pays off.
    """
    rows = []
    for debt in debts:
        if debt.principal == 0:
            months, interest = 0, 0.0
        else:
            result = simulate_payoff(
                debt.principal,
                debt.monthly_rate,
                debt.scheduled_payment,
                limits=limits,
                debt_id=debt.id,
            )
            months, interest = result.months, result.total_interest
        rows.append({
            'debt_id': debt.id,
            'balance': debt.principal,
            'monthly_rate': debt.monthly_rate,
            'payment': debt.scheduled_payment,
            'months': months,
            'interest': interest,
        })

    return pd.DataFrame(rows, columns=['debt_id', 'balance', 'monthly_rate', 'payment', 'months', 'interest'])


def _plan_summary(current_payment: float, extra_payment: float) -> str:
    total = current_payment + extra_payment
    return (
        f"The total of your current monthly debt payments (${format_number(current_payment, 2)}), "
        f"plus the additional monthly amount of ${format_number(extra_payment, 2)}, "
        f"is equal to ${format_number(total, 2)}. This is how much you will allocate "
        f"to paying off your debts until all of the above debts are paid off."
    )


def compare_payoff_plans(
    debts: Iterable[Debt],
    extra_payment: float = 0.0,
    limits: Optional[SimulationLimits] = None,
) -> dict:
    """Compare paying each debt separately against the accelerated plan.

    The current plan pays every debt its scheduled payment until it is gone;
    it lasts as long as the slowest debt. The accelerated plan adds
    ``extra_payment`` and rolls freed payments into the remaining debts.

    Args:
        debts: Debts in entry order
        extra_payment: Additional monthly amount for the accelerated plan
        limits: Runaway cutoffs for both simulators

    Returns:
        Dictionary with both plans, the savings, a per-debt table and the
        accelerated month-by-month schedule
    """
    debts = list(debts)
    if not debts:
        raise InvalidInput("debts", debts, "must include at least one debt")
    extra_payment = require_non_negative("extra_payment", extra_payment)

    current = payoff_table(debts, limits=limits)
    accelerated = simulate_snowball(debts, extra_payment, limits=limits)

    total_principal = sum(d.principal for d in debts)
    current_payment = sum(d.scheduled_payment for d in debts if d.principal > 0)
    current_interest = float(current['interest'].sum())
    current_months = int(current['months'].max())

    table = current.rename(columns={'months': 'current_months', 'interest': 'current_interest'})
    table['accelerated_months'] = [accelerated.payoff_months[d.id] for d in debts]

    return {
        'total_principal': round(total_principal, 2),

        'current_monthly_payment': round(current_payment, 2),
        'current_total_interest': round(current_interest, 2),
        'current_months': current_months,

        'extra_payment': round(extra_payment, 2),
        'accelerated_monthly_payment': round(current_payment + extra_payment, 2),
        'accelerated_total_interest': round(accelerated.total_interest, 2),
        'accelerated_months': accelerated.total_months,

        'months_saved': current_months - accelerated.total_months,
        'interest_saved': round(current_interest - accelerated.total_interest, 2),

        'summary': _plan_summary(current_payment, extra_payment),
        'debts': table,
        'schedule': accelerated.schedule,
    }
