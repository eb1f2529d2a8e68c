"""Engine limits, solver tolerances and display settings."""

from dataclasses import dataclass

# Hard iteration caps. These are counts, never wall-clock timeouts.
MAX_SINGLE_DEBT_PERIODS = 1000
MAX_SNOWBALL_PERIODS = 600  # 50 years of monthly payments
MAX_SOLVER_ITERATIONS = 50

# Rate solver starts from a 10% APR guess
DEFAULT_RATE_GUESS_PCT = 10.0

PERIODS_PER_YEAR = 12


@dataclass(frozen=True)
class SimulationLimits:
    """Runaway cutoffs for the payoff simulators."""

    max_single_debt_periods: int = MAX_SINGLE_DEBT_PERIODS
    max_snowball_periods: int = MAX_SNOWBALL_PERIODS


@dataclass(frozen=True)
class SolverSettings:
    """Newton-Raphson settings for the rate solver."""

    max_iterations: int = MAX_SOLVER_ITERATIONS
    tolerance: float = 1e-10  # |f(r)| below this counts as converged
    derivative_epsilon: float = 1e-8  # step for the central difference
    min_derivative: float = 1e-12  # flatter than this and we stop
    min_rate: float = 1e-9  # periodic rate clamp
    max_rate: float = 1.0


@dataclass(frozen=True)
class FormatSettings:
    """Locale and currency used when formatting results."""

    currency_symbol: str = "$"
    currency_decimals: int = 0
    number_decimals: int = 2
    empty_placeholder: str = "—"


DEFAULT_LIMITS = SimulationLimits()
DEFAULT_SOLVER_SETTINGS = SolverSettings()
DEFAULT_FORMAT = FormatSettings()
