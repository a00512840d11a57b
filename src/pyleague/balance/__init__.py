"""Balance testing: the possession model and its Monte-Carlo harness."""

from .monte_carlo import (
    CSV_HEADER,
    DEFAULT_PARAMETERS,
    BalanceRunPartial,
    ParameterBand,
    SampleResult,
    SamplingParameters,
    run_monte_carlo,
    sample_tendencies,
    write_results_csv,
)
from .possession import (
    POSSESSIONS,
    GameState,
    PossessionOutcome,
    Tendencies,
    adjust_rebounding,
    advance,
    resolve_possession,
    simulate_game,
)

__all__ = [
    "CSV_HEADER",
    "DEFAULT_PARAMETERS",
    "POSSESSIONS",
    "BalanceRunPartial",
    "GameState",
    "ParameterBand",
    "PossessionOutcome",
    "SampleResult",
    "SamplingParameters",
    "Tendencies",
    "adjust_rebounding",
    "advance",
    "resolve_possession",
    "run_monte_carlo",
    "sample_tendencies",
    "simulate_game",
    "write_results_csv",
]
