"""
Pattern Detector — sequence repeats, colour streaks and outside-bet
imbalances (dozens, columns, even/odd, high/low).

Each imbalance strategy compares a trailing-window share against its
theoretical expectation and calls either a reversal (the side that is
lagging) or a continuation (the side that is leading slightly).
"""

from collections import Counter

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, DOZENS, COLUMNS,
    PATTERN_MIN_SPINS, PATTERN_SEQUENCE_LENGTHS, STRATEGY_PICK_COUNT,
    COLOUR_STREAK_MIN_SPINS, COLOUR_REVERSAL_STREAK,
    DOZEN_MIN_SPINS, DOZEN_MIN_NONZERO, DOZEN_WINDOW,
    EVEN_ODD_MIN_SPINS, EVEN_ODD_MIN_NONZERO, EVEN_ODD_WINDOW,
    EVEN_ODD_UPPER, EVEN_ODD_LOWER,
    HIGH_LOW_MIN_SPINS, HIGH_LOW_MIN_NONZERO, HIGH_LOW_WINDOW,
    HIGH_LOW_UPPER, HIGH_LOW_LOWER,
    COLUMN_MIN_SPINS, COLUMN_MIN_NONZERO, COLUMN_WINDOW,
)
from app.ml.classifier import (
    color, is_even, is_odd, is_low, is_high, dozen, column_of, round_half_up,
)
from app.ml.results import StrategyResult


def _get_streak(history, category_fn):
    """Length of the run of history[-1]'s category at the end of history."""
    if not history:
        return 0
    current = category_fn(history[-1])
    streak = 0
    for num in reversed(history):
        if category_fn(num) == current:
            streak += 1
        else:
            break
    return streak


def _followers(history, seq_len):
    """Tally of what came right after each earlier occurrence of the suffix."""
    suffix = list(history[-seq_len:])
    found = Counter()
    # The suffix's own position is excluded: it has no follower yet
    for i in range(len(history) - seq_len):
        if list(history[i:i + seq_len]) == suffix:
            found[history[i + seq_len]] += 1
    return found


def pattern_repeat(history):
    if len(history) < PATTERN_MIN_SPINS:
        return None

    found, seq_used = Counter(), 0
    for seq_len in PATTERN_SEQUENCE_LENGTHS:
        found = _followers(history, seq_len)
        if found:
            seq_used = seq_len
            break
    if not found:
        return None

    # Counter keeps first-seen order; sorted() is stable on ties
    ranked = sorted(found.items(), key=lambda item: -item[1])
    total = sum(found.values())
    seq = '→'.join(str(n) for n in history[-seq_used:])

    return StrategyResult(
        numbers=[n for n, _ in ranked[:STRATEGY_PICK_COUNT]],
        confidence=min(80, round_half_up(30 + total * 10)),
        reasoning=(f"Sequence [{seq}] found {total}x in history ({seq_used}-step). "
                   f"Predicts the numbers that followed it. Pattern continuation bet."),
    )


def colour_streak(history):
    if len(history) < COLOUR_STREAK_MIN_SPINS:
        return None

    last_colour = color(history[-1])
    streak = _get_streak(history, color)
    reversal = streak >= COLOUR_REVERSAL_STREAK
    if reversal:
        target = 'black' if last_colour == 'red' else 'red'
        confidence = min(74, 38 + streak * 7)
        reasoning = (f"{last_colour.title()} streak of {streak}. Reversal to "
                     f"{target.title()} predicted. Colour alternation tendency.")
    else:
        target = last_colour
        confidence = min(54, 26 + streak * 5)
        reasoning = (f"{last_colour.title()} momentum: {streak} in a row. "
                     f"Predicting continuation before reversal.")

    return StrategyResult(
        numbers=[n for n in range(TOTAL_NUMBERS) if color(n) == target],
        confidence=confidence,
        reasoning=reasoning,
    )


def _least_hit(labels, window):
    """Counts of 1/2/3 labels in the trailing window and the lagging labels."""
    recent = labels[-window:]
    counts = Counter(recent)
    lowest = min(counts.get(k, 0) for k in (1, 2, 3))
    due = [k for k in (1, 2, 3) if counts.get(k, 0) == lowest]
    return recent, counts, due


def dozen_rotation(history):
    if len(history) < DOZEN_MIN_SPINS:
        return None
    dozens = [dozen(n) for n in history if n != 0]
    if len(dozens) < DOZEN_MIN_NONZERO:
        return None

    recent, counts, due = _least_hit(dozens, DOZEN_WINDOW)
    expected = round_half_up(len(recent) / 3)

    return StrategyResult(
        numbers=[n for d in due for n in DOZENS[d]],
        confidence=min(72, 32 + len(recent)),
        reasoning=(f"Dozen {' & '.join(str(d) for d in due)} underrepresented: "
                   f"{counts.get(due[0], 0)} hits (expected ~{expected} in {len(recent)} "
                   f"non-zero spins). Rotation theory: cover the lagging dozen."),
    )


def column_cycle(history):
    if len(history) < COLUMN_MIN_SPINS:
        return None
    columns = [column_of(n) for n in history if n != 0]
    if len(columns) < COLUMN_MIN_NONZERO:
        return None

    recent, counts, due = _least_hit(columns, COLUMN_WINDOW)
    expected = round_half_up(len(recent) / 3)

    return StrategyResult(
        numbers=[n for c in due for n in COLUMNS[c]],
        confidence=min(67, 28 + len(recent)),
        reasoning=(f"Column {' & '.join(str(c) for c in due)} underperforming: "
                   f"{counts.get(due[0], 0)} hits (expected ~{expected} in {len(recent)} "
                   f"spins). Column rotation theory."),
    )


def even_odd_shift(history):
    if len(history) < EVEN_ODD_MIN_SPINS:
        return None
    nonzero = [n for n in history if n != 0][-EVEN_ODD_WINDOW:]
    if len(nonzero) < EVEN_ODD_MIN_NONZERO:
        return None

    even_share = sum(1 for n in nonzero if is_even(n)) / len(nonzero)
    if even_share > EVEN_ODD_UPPER:
        target = 'odd'
        reasoning = (f"Even dominance: {round_half_up(even_share * 100)}% in last "
                     f"{len(nonzero)} non-zero spins. Odd correction predicted.")
    elif even_share < EVEN_ODD_LOWER:
        target = 'even'
        reasoning = (f"Odd dominance: {round_half_up((1 - even_share) * 100)}% in last "
                     f"{len(nonzero)} spins. Even correction predicted.")
    else:
        target = 'even' if even_share >= 0.5 else 'odd'
        lean = even_share if target == 'even' else 1 - even_share
        reasoning = f"Slight {target} lean ({round_half_up(lean * 100)}%) continuing."

    member = is_even if target == 'even' else is_odd
    return StrategyResult(
        numbers=[n for n in range(TOTAL_NUMBERS) if member(n)],
        confidence=min(66, round_half_up(24 + abs(even_share - 0.5) * 90)),
        reasoning=reasoning,
    )


def high_low_balance(history):
    if len(history) < HIGH_LOW_MIN_SPINS:
        return None
    nonzero = [n for n in history if n != 0][-HIGH_LOW_WINDOW:]
    if len(nonzero) < HIGH_LOW_MIN_NONZERO:
        return None

    low_count = sum(1 for n in nonzero if is_low(n))
    low_share = low_count / len(nonzero)
    if low_share > HIGH_LOW_UPPER:
        target = 'high'
    elif low_share < HIGH_LOW_LOWER:
        target = 'low'
    else:
        target = 'low' if low_share >= 0.5 else 'high'

    member = is_low if target == 'low' else is_high
    label = '1-18' if target == 'low' else '19-36'
    return StrategyResult(
        numbers=[n for n in range(TOTAL_NUMBERS) if member(n)],
        confidence=min(63, round_half_up(22 + abs(low_share - 0.5) * 80)),
        reasoning=(f"{label} predicted. Low: {low_count}, High: {len(nonzero) - low_count} "
                   f"in last {len(nonzero)} non-zero spins. Range balance correction."),
    )
