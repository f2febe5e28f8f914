"""
Consensus Engine - merges the 12 strategies into one ranked number list.

Every active strategy votes for each number it recommends with weight
    confidence * (12 / max(1, picks))
so a strategy that narrows to fewer numbers carries more weight per
number (specificity bonus).  Votes are summed per number, ranked, and
the top slice is reported with a normalised confidence.

Recomputed from scratch on every request; nothing is cached between calls.
"""

import math
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS,
    CONSENSUS_SPECIFICITY_BASE, CONSENSUS_MIN_PREDICTIONS,
    CONSENSUS_MAX_PREDICTIONS, CONSENSUS_SHARE,
    CONSENSUS_CONFIDENCE_SCALE, CONSENSUS_CONFIDENCE_FLOOR,
    CONSENSUS_CONFIDENCE_CAP,
)
from app.ml.classifier import color, round_half_up
from app.ml.strategies import Strategy, evaluate_strategy


@dataclass
class ConsensusResult:
    predictions: List[dict]
    outcomes: Dict[str, object]
    active_count: int
    voted_count: int = 0

    @property
    def top_numbers(self):
        return [p['number'] for p in self.predictions]

    def to_dict(self):
        return {
            'predictions': [dict(p) for p in self.predictions],
            'strategies': [o.to_dict() for o in self.outcomes.values()],
            'active_count': self.active_count,
            'strategy_count': len(self.outcomes),
            'voted_count': self.voted_count,
        }


def prediction_count(voted_count):
    """How many ranked numbers to report for a given number of voted numbers."""
    wanted = max(CONSENSUS_MIN_PREDICTIONS, math.ceil(voted_count * CONSENSUS_SHARE))
    return min(CONSENSUS_MAX_PREDICTIONS, wanted, voted_count)


def normalised_confidence(weight, top_weight):
    return min(CONSENSUS_CONFIDENCE_CAP,
               round_half_up((weight / top_weight) * CONSENSUS_CONFIDENCE_SCALE
                             + CONSENSUS_CONFIDENCE_FLOOR))


class ConsensusEngine:
    """Runs the strategy library and aggregates the votes."""

    def __init__(self, strategies=None, functions=None):
        self.strategies = list(strategies or Strategy)
        # Optional registry override, used by tests to inject faulty strategies
        self.functions = functions

    def evaluate(self, history):
        """Outcome of every strategy, keyed by display name, in enum order."""
        return {
            s.label: evaluate_strategy(s, history, self.functions)
            for s in self.strategies
        }

    def run(self, history):
        history = list(history)
        outcomes = self.evaluate(history)

        votes = np.zeros(TOTAL_NUMBERS, dtype=np.float64)
        voted = np.zeros(TOTAL_NUMBERS, dtype=bool)
        supporters = np.zeros(TOTAL_NUMBERS, dtype=np.int64)
        active_count = 0

        for outcome in outcomes.values():
            if not outcome.available:
                continue
            active_count += 1
            result = outcome.result
            weight = result.confidence * (CONSENSUS_SPECIFICITY_BASE / max(1, len(result.numbers)))
            for n in result.numbers:
                votes[n] += weight
                voted[n] = True
                supporters[n] += 1

        voted_numbers = np.flatnonzero(voted)
        # Descending weight; stable sort keeps ascending number order on ties
        ranked = voted_numbers[np.argsort(-votes[voted_numbers], kind='stable')]

        predictions = []
        if len(ranked):
            top_weight = float(votes[ranked[0]]) or 1.0
            for n in ranked[:prediction_count(len(ranked))]:
                n = int(n)
                predictions.append({
                    'number': n,
                    'color': color(n),
                    'confidence': normalised_confidence(float(votes[n]), top_weight),
                    'vote_count': int(supporters[n]),
                    'weight': round(float(votes[n]), 4),
                })

        return ConsensusResult(
            predictions=predictions,
            outcomes=outcomes,
            active_count=active_count,
            voted_count=int(len(ranked)),
        )
