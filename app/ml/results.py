"""
Result types shared by the strategy library and the consensus engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass
class StrategyResult:
    """One strategy's recommendation: ranked numbers, confidence, rationale."""
    numbers: List[int]
    confidence: float
    reasoning: str

    def __post_init__(self):
        # Unique, in rank order
        self.numbers = list(dict.fromkeys(int(n) for n in self.numbers))

    def to_dict(self):
        return {
            'numbers': list(self.numbers),
            'confidence': self.confidence,
            'reasoning': self.reasoning,
        }


class OutcomeStatus(Enum):
    SUCCESS = 'active'
    UNAVAILABLE = 'inactive'
    FAULTED = 'faulted'


@dataclass
class StrategyOutcome:
    """What happened when a strategy was evaluated against the history."""
    name: str
    status: OutcomeStatus
    result: Optional[StrategyResult] = None
    error: str = field(default='')

    @property
    def available(self):
        return self.status is OutcomeStatus.SUCCESS

    def to_dict(self):
        data = {
            'name': self.name,
            'status': self.status.value,
            'result': self.result.to_dict() if self.result else None,
        }
        if self.error:
            data['error'] = self.error
        return data
