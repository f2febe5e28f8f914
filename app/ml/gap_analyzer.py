"""
Gap Analyzer — Contrarian/Mean Reversion strategy.

Tracks how many spins have passed since each number last appeared and
recommends the numbers with the longest absence.
"""

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, GAP_MIN_SPINS, GAP_UNSEEN_PENALTY, STRATEGY_PICK_COUNT,
)
from app.ml.classifier import round_half_up
from app.ml.results import StrategyResult


def _last_seen(history):
    last_seen = {}
    for i, n in enumerate(history):
        last_seen[n] = i
    return last_seen


def get_gap_stats(history, unseen_gap=None):
    """Spins since each number last appeared, keyed by number.

    A number never seen gets `unseen_gap` (default: the history length).
    """
    if unseen_gap is None:
        unseen_gap = len(history)
    last_seen = _last_seen(history)
    last_index = len(history) - 1
    return {
        num: (last_index - last_seen[num]) if num in last_seen else unseen_gap
        for num in range(TOTAL_NUMBERS)
    }


def gap_analysis(history):
    """12 numbers with the longest absence."""
    if len(history) < GAP_MIN_SPINS:
        return None

    gaps = get_gap_stats(history, unseen_gap=len(history) + GAP_UNSEEN_PENALTY)
    # sorted() is stable: equal gaps keep ascending number order
    ranked = sorted(range(TOTAL_NUMBERS), key=lambda n: -gaps[n])
    top = ranked[0]
    top_gap = gaps[top]

    return StrategyResult(
        numbers=ranked[:STRATEGY_PICK_COUNT],
        confidence=min(76, round_half_up(26 + top_gap * 1.5)),
        reasoning=(f"{top} absent for {top_gap} spins "
                   f"({round_half_up(top_gap / len(history) * 100)}% of session). "
                   f"Expected every ~{TOTAL_NUMBERS} spins. Absence correction theory."),
    )
