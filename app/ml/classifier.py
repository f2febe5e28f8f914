"""
Outcome Classifier - pure lookups from a pocket number (0-36) to its
table and wheel attributes.

Every downstream stage (strategies, categories, agent state encoding,
summary statistics, CSV export) classifies numbers through these helpers
so the attributes of a number never disagree between components.
"""

import math

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, WHEEL_ORDER, NUMBER_TO_POSITION,
    RED_NUMBERS, BLACK_NUMBERS,
)

_RED = frozenset(RED_NUMBERS)
_BLACK = frozenset(BLACK_NUMBERS)


def color(n):
    if n in _RED:
        return 'red'
    elif n in _BLACK:
        return 'black'
    return 'green'


def color_code(n):
    """One-letter colour ('r', 'b', 'g') used in compact encodings."""
    return color(n)[0]


def is_even(n):
    return n != 0 and n % 2 == 0


def is_odd(n):
    return n % 2 == 1


def is_low(n):
    return 1 <= n <= 18


def is_high(n):
    return 19 <= n <= 36


def dozen(n):
    """1, 2 or 3 for the dozen containing n; 0 for zero."""
    if n == 0:
        return 0
    return (n - 1) // 12 + 1


def column_of(n):
    """1, 2 or 3 for the board column containing n; 0 for zero."""
    if n == 0:
        return 0
    return 3 if n % 3 == 0 else n % 3


def parity_label(n):
    if n == 0:
        return None
    return 'even' if n % 2 == 0 else 'odd'


def range_label(n):
    if n == 0:
        return None
    return 'low' if n <= 18 else 'high'


def wheel_position(n):
    return NUMBER_TO_POSITION[n]


def wheel_neighbours(n, radius=2):
    """The 2 * radius pockets physically adjacent to n.

    Ordered from the furthest anticlockwise pocket to the furthest
    clockwise one; positions wrap around the 37-slot wheel.
    """
    pos = NUMBER_TO_POSITION[n]
    size = len(WHEEL_ORDER)
    return [WHEEL_ORDER[(pos + d) % size]
            for d in range(-radius, radius + 1) if d != 0]


def is_valid_number(value):
    """True for a genuine int in 0-36 (bools are rejected)."""
    return (isinstance(value, int) and not isinstance(value, bool)
            and 0 <= value < TOTAL_NUMBERS)


def round_half_up(x):
    """Round .5 away from zero for positive scores (confidence formulas)."""
    return int(math.floor(x + 0.5))
