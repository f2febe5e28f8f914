"""
Strategy Library - the closed set of 12 prediction strategies.

Each strategy is a pure function `history -> StrategyResult | None`.
None means the history is still below that strategy's minimum.  The
`Strategy` enum fixes the set and its display order; `evaluate_strategy`
is the single place where a strategy fault is caught and turned into a
typed outcome, so one broken strategy never stops the others.
"""

from enum import Enum

from app.ml.classifier import is_valid_number
from app.ml.frequency_analyzer import hot_numbers, cold_numbers
from app.ml.gap_analyzer import gap_analysis
from app.ml.pattern_detector import (
    pattern_repeat, colour_streak, dozen_rotation, even_odd_shift,
    high_low_balance, column_cycle,
)
from app.ml.results import OutcomeStatus, StrategyOutcome
from app.ml.wheel_strategy import wheel_sector_bias, recency_cluster, fibonacci_positions


class Strategy(Enum):
    HOT_NUMBERS = 'Hot Numbers'
    COLD_NUMBERS = 'Cold Numbers'
    WHEEL_SECTOR_BIAS = 'Wheel Sector Bias'
    PATTERN_REPEAT = 'Pattern Repeat'
    COLOUR_STREAK = 'Colour Streak'
    DOZEN_ROTATION = 'Dozen Rotation'
    GAP_ANALYSIS = 'Gap Analysis'
    EVEN_ODD_SHIFT = 'Even/Odd Shift'
    HIGH_LOW_BALANCE = 'High/Low Balance'
    COLUMN_CYCLE = 'Column Cycle'
    RECENCY_CLUSTER = 'Recency Cluster'
    FIBONACCI_POSITIONS = 'Fibonacci Positions'

    @property
    def label(self):
        return self.value


STRATEGY_FUNCTIONS = {
    Strategy.HOT_NUMBERS: hot_numbers,
    Strategy.COLD_NUMBERS: cold_numbers,
    Strategy.WHEEL_SECTOR_BIAS: wheel_sector_bias,
    Strategy.PATTERN_REPEAT: pattern_repeat,
    Strategy.COLOUR_STREAK: colour_streak,
    Strategy.DOZEN_ROTATION: dozen_rotation,
    Strategy.GAP_ANALYSIS: gap_analysis,
    Strategy.EVEN_ODD_SHIFT: even_odd_shift,
    Strategy.HIGH_LOW_BALANCE: high_low_balance,
    Strategy.COLUMN_CYCLE: column_cycle,
    Strategy.RECENCY_CLUSTER: recency_cluster,
    Strategy.FIBONACCI_POSITIONS: fibonacci_positions,
}


def evaluate_strategy(strategy, history, functions=None):
    """Run one strategy and wrap the result in a StrategyOutcome.

    `functions` overrides the registry (used to inject failing strategies).
    """
    fn = (functions or STRATEGY_FUNCTIONS)[strategy]
    try:
        result = fn(list(history))
    except Exception as e:
        print(f"[Consensus] Strategy '{strategy.label}' failed: {e}")
        return StrategyOutcome(strategy.label, OutcomeStatus.FAULTED, error=str(e))

    if result is None:
        return StrategyOutcome(strategy.label, OutcomeStatus.UNAVAILABLE)
    if not all(is_valid_number(n) for n in result.numbers):
        print(f"[Consensus] Strategy '{strategy.label}' returned numbers outside 0-36")
        return StrategyOutcome(strategy.label, OutcomeStatus.FAULTED,
                               error='numbers outside 0-36')
    return StrategyOutcome(strategy.label, OutcomeStatus.SUCCESS, result=result)
