"""
Bet Category Scorer - maps the consensus picks onto table bets.

Twelve fixed outside bets (colour, parity, range, dozens, columns) plus
the best six-line, corner and split found by scanning every valid board
position.  A category's score is the share of its numbers that are in
the consensus list; colour/parity/range/dozen bets that have been lagging
over the last 20 spins get a "due" bonus on top.
"""

from dataclasses import dataclass
from typing import List

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, DOZENS, COLUMNS, PAYOUTS, COVERAGE,
    CATEGORY_BIAS_WINDOW, CATEGORY_EVEN_MONEY_BONUS, CATEGORY_DOZEN_BONUS,
    CATEGORY_LOW_RATE, CATEGORY_HIGH_RATE,
)
from app.ml.classifier import color, is_even, is_odd, is_low, is_high, dozen


@dataclass
class BetCategory:
    id: str
    label: str
    group: str
    numbers: List[int]
    payout: str
    coverage: float
    score: float

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'group': self.group,
            'numbers': list(self.numbers),
            'payout': self.payout,
            'coverage': self.coverage,
            'score': round(self.score, 4),
            'match_pct': min(100, int(self.score * 100 + 0.5)),
        }


def _members(predicate):
    return [n for n in range(TOTAL_NUMBERS) if predicate(n)]


# Fixed groups in display order: (id, label, group, numbers, bet size)
FIXED_GROUPS = [
    ('red', 'Red (18)', 'COLOUR', _members(lambda n: color(n) == 'red'), 'even_money'),
    ('black', 'Black (18)', 'COLOUR', _members(lambda n: color(n) == 'black'), 'even_money'),
    ('even', 'Even (18)', 'PARITY', _members(is_even), 'even_money'),
    ('odd', 'Odd (18)', 'PARITY', _members(is_odd), 'even_money'),
    ('low', '1-18', 'RANGE', _members(is_low), 'even_money'),
    ('high', '19-36', 'RANGE', _members(is_high), 'even_money'),
    ('d1', '1st Dozen', 'DOZEN', DOZENS[1], 'dozen'),
    ('d2', '2nd Dozen', 'DOZEN', DOZENS[2], 'dozen'),
    ('d3', '3rd Dozen', 'DOZEN', DOZENS[3], 'dozen'),
    ('c1', 'Column 1', 'COLUMN', COLUMNS[1], 'column'),
    ('c2', 'Column 2', 'COLUMN', COLUMNS[2], 'column'),
    ('c3', 'Column 3', 'COLUMN', COLUMNS[3], 'column'),
]
FIXED_NUMBERS = {gid: list(nums) for gid, _, _, nums, _ in FIXED_GROUPS}

# Every six-line: rows r..r+5 for r = 1, 4, ..., 31
LINES = [list(range(r, r + 6)) for r in range(1, 32, 3)]

# Every corner: n, n+1, n+3, n+4 where n is not in the right-hand column
CORNERS = [[n, n + 1, n + 3, n + 4] for n in range(1, 33) if n % 3 != 0]

# Horizontal splits first, then vertical ones
SPLITS = ([[n, n + 1] for n in range(1, 36) if n % 3 != 0]
          + [[n, n + 3] for n in range(1, 34)])


def coverage_score(numbers, top_numbers):
    """Fraction of `numbers` that appear in the consensus list."""
    if not numbers:
        return 0.0
    top = set(top_numbers)
    return sum(1 for n in numbers if n in top) / len(numbers)


def _best_of(candidates, top_numbers):
    best, best_score = None, -1.0
    for candidate in candidates:
        score = coverage_score(candidate, top_numbers)
        if score > best_score:
            best, best_score = candidate, score
    return best, best_score


def best_line(top_numbers):
    return _best_of(LINES, top_numbers)


def best_corner(top_numbers):
    return _best_of(CORNERS, top_numbers)


def best_split(top_numbers):
    return _best_of(SPLITS, top_numbers)


def due_bonuses(history):
    """Bonus per fixed group id for attributes lagging in the last 20 spins."""
    recent = list(history[-CATEGORY_BIAS_WINDOW:])
    total = max(1, len(recent))
    red_rate = sum(1 for n in recent if color(n) == 'red') / total
    even_rate = sum(1 for n in recent if is_even(n)) / total
    low_rate = sum(1 for n in recent if is_low(n)) / total
    dozen_counts = {d: sum(1 for n in recent if dozen(n) == d) for d in (1, 2, 3)}

    def lagging(rate):
        return CATEGORY_EVEN_MONEY_BONUS if rate < CATEGORY_LOW_RATE else 0.0

    def leading(rate):
        return CATEGORY_EVEN_MONEY_BONUS if rate > CATEGORY_HIGH_RATE else 0.0

    bonuses = {
        'red': lagging(red_rate), 'black': leading(red_rate),
        'even': lagging(even_rate), 'odd': leading(even_rate),
        'low': lagging(low_rate), 'high': leading(low_rate),
        'c1': 0.0, 'c2': 0.0, 'c3': 0.0,
    }
    for d in (1, 2, 3):
        others = [dozen_counts[k] for k in (1, 2, 3) if k != d]
        bonuses[f'd{d}'] = CATEGORY_DOZEN_BONUS if all(dozen_counts[d] < c for c in others) else 0.0
    return bonuses


def score_categories(top_numbers, history):
    """All 15 categories, best match first."""
    bonuses = due_bonuses(history)
    categories = []
    for gid, label, group, numbers, size in FIXED_GROUPS:
        categories.append(BetCategory(
            id=gid, label=label, group=group, numbers=list(numbers),
            payout=PAYOUTS[size], coverage=COVERAGE[size],
            score=coverage_score(numbers, top_numbers) + bonuses[gid],
        ))

    line, line_score = best_line(top_numbers)
    categories.append(BetCategory(
        id='line', label=f'Line {line[0]}-{line[-1]}', group='LINE(6)', numbers=line,
        payout=PAYOUTS['six_line'], coverage=COVERAGE['six_line'], score=line_score,
    ))
    corner, corner_score = best_corner(top_numbers)
    categories.append(BetCategory(
        id='corner', label='Corner ' + '/'.join(str(n) for n in corner), group='CORNER(4)',
        numbers=corner, payout=PAYOUTS['corner'], coverage=COVERAGE['corner'],
        score=corner_score,
    ))
    split, split_score = best_split(top_numbers)
    categories.append(BetCategory(
        id='split', label='Split ' + '/'.join(str(n) for n in split), group='SPLIT(2)',
        numbers=split, payout=PAYOUTS['split'], coverage=COVERAGE['split'],
        score=split_score,
    ))

    # sorted() is stable: equal scores keep display order
    return sorted(categories, key=lambda c: -c.score)
