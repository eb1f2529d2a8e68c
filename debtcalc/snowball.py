"""Accelerated ("snowball") payoff of several debts at once.

Every debt keeps receiving its scheduled payment. Each month a pool made of
the extra payment, the scheduled payments of debts already paid off, and any
overshoot from debts finishing this month is applied to the remaining debts
in the order they were entered. Debts are never re-ranked by balance or rate:
entry order decides who absorbs the pool first.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from loguru import logger

from .amortization import amortize_month, normalize_annual_rate
from .config import DEFAULT_LIMITS, PERIODS_PER_YEAR, SimulationLimits
from .errors import InvalidInput, RunawayIteration
from .validation import require_non_negative, require_positive

SCHEDULE_COLUMNS = ['month', 'debt_id', 'payment', 'interest', 'principal', 'balance']


@dataclass
class Debt:
    """A debt being paid down by the simulation."""

    id: Any
    principal: float  # outstanding balance
    monthly_rate: float  # periodic rate as a fraction
    scheduled_payment: float  # regular minimum payment
    paid_off: bool = False

    @classmethod
    def from_apr(cls, id: Any, principal: float, annual_rate: float, payment: float) -> "Debt":
        """Build a debt from an annual rate given as 18 or 0.18 for 18%."""
        return cls(
            id=id,
            principal=principal,
            monthly_rate=normalize_annual_rate(annual_rate) / PERIODS_PER_YEAR,
            scheduled_payment=payment,
        )


@dataclass
class SnowballResult:
    """Outcome of an accelerated payoff plan."""

    total_months: int
    total_interest: float
    payoff_months: Dict[Any, int] = field(default_factory=dict)  # debt id -> payoff month
    schedule: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=SCHEDULE_COLUMNS))
    debts: List[Debt] = field(default_factory=list)


def _prepare_debts(debts: Iterable[Debt]) -> List[Debt]:
    """Validate and copy the input so the caller's records are left untouched.

    A debt with a zero balance comes back already paid off.
    """
    prepared = []
    seen_ids = set()
    for index, debt in enumerate(debts, start=1):
        label = f"debt #{debt.id if debt.id is not None else index}"
        if debt.id in seen_ids:
            raise InvalidInput(f"{label} id", debt.id, "must be unique")
        seen_ids.add(debt.id)

        principal = require_non_negative(f"{label} principal", debt.principal)
        check_payment = require_positive if principal > 0 else require_non_negative
        prepared.append(Debt(
            id=debt.id,
            principal=principal,
            monthly_rate=require_non_negative(f"{label} monthly_rate", debt.monthly_rate),
            scheduled_payment=check_payment(f"{label} scheduled_payment", debt.scheduled_payment),
            paid_off=principal == 0,
        ))
    return prepared


def _redirect_pool(
    debts: List[Debt],
    pool: float,
    paid: List[float],
    month: int,
    payoff_months: Dict[Any, int],
) -> float:
    """Pour ``pool`` into active debts in entry order; return what is left."""
    for i, debt in enumerate(debts):
        if pool <= 0:
            break
        if debt.paid_off:
            continue

        if debt.principal > pool:
            debt.principal -= pool
            paid[i] += pool
            pool = 0.0
        else:
            paid[i] += debt.principal
            pool -= debt.principal
            debt.principal = 0.0
            debt.paid_off = True
            payoff_months[debt.id] = month

    return pool


def simulate_snowball(
    debts: Iterable[Debt],
    extra_payment: float = 0.0,
    limits: Optional[SimulationLimits] = None,
) -> SnowballResult:
    """Simulate paying all debts together with a shared extra payment.

    Args:
        debts: Debts in entry order; they are copied, not mutated
        extra_payment: Additional amount available every month
        limits: Runaway cutoffs, defaults to DEFAULT_LIMITS

    Debts entered with a zero balance are reported as paid off in month 0.
    They take no part in the plan: they get no interest and no schedule rows,
    and their scheduled payment never joins the pool.

    Returns:
        SnowballResult with total months, total interest, the month each debt
        was paid off and a per-debt, per-month schedule DataFrame.

    Raises:
        RunawayIteration: if the debts are not all paid within
            ``limits.max_snowball_periods`` months.
    """
    limits = limits or DEFAULT_LIMITS
    extra = require_non_negative("extra_payment", extra_payment)
    prepared = _prepare_debts(debts)
    payoff_months: Dict[Any, int] = {d.id: 0 for d in prepared if d.paid_off}
    state = [d for d in prepared if not d.paid_off]

    total_interest = 0.0
    month = 0
    rows = []

    while not all(debt.paid_off for debt in state):
        if month >= limits.max_snowball_periods:
            logger.info(
                f"Payoff plan for {len(state)} debts still unfinished after {month} months"
            )
            raise RunawayIteration(
                limit=limits.max_snowball_periods,
                months=month,
                total_interest=total_interest,
            )

        month += 1
        pool = extra
        paid = [0.0] * len(state)
        interest_paid = [0.0] * len(state)
        active = [not debt.paid_off for debt in state]

        for i, debt in enumerate(state):
            if debt.paid_off:
                # Freed minimum payment rolls into the pool
                pool += debt.scheduled_payment
                continue

            interest, payment, debt.principal, excess = amortize_month(
                debt.principal, debt.monthly_rate, debt.scheduled_payment
            )
            total_interest += interest

            if debt.principal == 0:
                pool += excess
                debt.paid_off = True
                payoff_months[debt.id] = month

            paid[i] = payment
            interest_paid[i] = interest

        if pool > 0:
            _redirect_pool(state, pool, paid, month, payoff_months)

        for i, debt in enumerate(state):
            if not active[i]:
                continue
            rows.append({
                'month': month,
                'debt_id': debt.id,
                'payment': round(paid[i], 2),
                'interest': round(interest_paid[i], 2),
                'principal': round(paid[i] - interest_paid[i], 2),
                'balance': round(debt.principal, 2),
            })

    logger.debug(
        f"Payoff plan for {len(state)} debts finished in {month} months "
        f"with {total_interest:,.2f} interest"
    )

    return SnowballResult(
        total_months=month,
        total_interest=total_interest,
        payoff_months=payoff_months,
        schedule=pd.DataFrame(rows, columns=SCHEDULE_COLUMNS),
        debts=prepared,
    )
