"""
Frequency Analyzer — Hot/Cold number strategies and session statistics.

Hot Numbers and Cold Numbers score each pocket against the uniform
expectation (window / 37) in a trailing window.  The session summary adds
a chi-square goodness-of-fit test against the uniform distribution plus
per-attribute directional bias for the dashboard.
"""

import numpy as np
from scipy import stats

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, HOT_WINDOW, HOT_MIN_SPINS, COLD_WINDOW, COLD_MIN_SPINS,
    STRATEGY_PICK_COUNT, HOT_RATIO, COLD_RATIO,
    SUMMARY_BIAS_WINDOW, SUMMARY_BIAS_TOLERANCE, SUMMARY_TREND_TOLERANCE,
    COVERAGE,
)
from app.ml.classifier import (
    color, is_even, is_low, dozen, round_half_up,
)
from app.ml.gap_analyzer import get_gap_stats
from app.ml.results import StrategyResult


def frequency_table(history):
    """Counts per pocket as an int array of shape (37,)."""
    return np.bincount(np.asarray(history, dtype=np.int64), minlength=TOTAL_NUMBERS)


def hot_numbers(history):
    """12 most frequent numbers in the last 50 spins."""
    window = history[-HOT_WINDOW:]
    if len(window) < HOT_MIN_SPINS:
        return None

    counts = frequency_table(window)
    expected = len(window) / TOTAL_NUMBERS
    scores = counts / max(0.01, expected)
    # Stable sort keeps lower numbers first on equal scores
    order = np.argsort(-scores, kind='stable')
    top = int(order[0])
    top_score = float(scores[top])

    return StrategyResult(
        numbers=[int(n) for n in order[:STRATEGY_PICK_COUNT]],
        confidence=min(90, round_half_up(top_score * 28 + len(window) / 4)),
        reasoning=(f"Top {STRATEGY_PICK_COUNT} most frequent in last {len(window)} spins. "
                   f"Hottest: {top} with {int(counts[top])} hits "
                   f"({top_score:.1f}x the expected rate). Classic frequency betting."),
    )


def cold_numbers(history):
    """12 least-seen numbers in the last 80 spins (contrarian 'due' theory)."""
    window = history[-COLD_WINDOW:]
    if len(window) < COLD_MIN_SPINS:
        return None

    counts = frequency_table(window)
    order = np.argsort(counts, kind='stable')
    coldest = int(order[0])

    return StrategyResult(
        numbers=[int(n) for n in order[:STRATEGY_PICK_COUNT]],
        confidence=min(68, round_half_up(18 + len(window) / 6)),
        reasoning=(f"{STRATEGY_PICK_COUNT} least-seen numbers in last {len(window)} spins. "
                   f"Coldest: {coldest} ({int(counts[coldest])} hits). "
                   f"Contrarian play on 'overdue' numbers."),
    )


def get_chi_square_result(history):
    """Chi-square goodness-of-fit test against uniform distribution."""
    if len(history) < 10:
        return {'statistic': 0.0, 'p_value': 1.0, 'significant': False}

    observed = frequency_table(history)
    expected = np.full(TOTAL_NUMBERS, len(history) / TOTAL_NUMBERS)

    chi2, p_value = stats.chisquare(observed, expected)
    return {
        'statistic': round(float(chi2), 4),
        'p_value': round(float(p_value), 4),
        'significant': bool(p_value < 0.05),
    }


def _direction(actual_pct, expected_pct, tolerance):
    deviation = actual_pct - expected_pct
    if deviation > tolerance:
        return '▲'
    if deviation < -tolerance:
        return '▼'
    return '≈'


def get_bias_report(history, window=SUMMARY_BIAS_WINDOW):
    """Share of each outside-bet attribute in the trailing window vs. theory."""
    recent = list(history[-window:])
    nonzero = [n for n in recent if n != 0]
    total = max(1, len(recent))
    nz_total = max(1, len(nonzero))

    red_rate = sum(1 for n in recent if color(n) == 'red') / total
    even_rate = sum(1 for n in nonzero if is_even(n)) / nz_total
    low_rate = sum(1 for n in nonzero if is_low(n)) / nz_total
    dozen_rates = {d: sum(1 for n in recent if dozen(n) == d) / total for d in (1, 2, 3)}

    even_money = COVERAGE['even_money']
    items = [
        ('Red', red_rate * 100, even_money),
        ('Black', (1 - red_rate) * 100, even_money),
        ('Even', even_rate * 100, even_money),
        ('Odd', (1 - even_rate) * 100, even_money),
        ('1-18', low_rate * 100, even_money),
        ('19-36', (1 - low_rate) * 100, even_money),
        ('D1', dozen_rates[1] * 100, COVERAGE['dozen']),
        ('D2', dozen_rates[2] * 100, COVERAGE['dozen']),
        ('D3', dozen_rates[3] * 100, COVERAGE['dozen']),
    ]
    return [{
        'label': label,
        'pct': round(pct, 1),
        'expected': expected,
        'direction': _direction(pct, expected, SUMMARY_BIAS_TOLERANCE),
    } for label, pct, expected in items]


def get_summary(history):
    """Session statistics for the analysis view.

    Counts, frequency heatmap, hottest/coldest pocket, longest absence,
    colour/parity/range splits, trailing-window bias and a chi-square test.
    """
    total = len(history)
    if total == 0:
        return {'total_spins': 0, 'available': False}

    counts = frequency_table(history)
    nonzero = [n for n in history if n != 0]
    red = sum(1 for n in history if color(n) == 'red')
    black = sum(1 for n in history if color(n) == 'black')
    zero = int(counts[0])
    even = sum(1 for n in nonzero if is_even(n))
    low = sum(1 for n in nonzero if is_low(n))

    hottest = int(np.argmax(counts))
    coldest = int(np.argmin(counts))

    gap_stats = get_gap_stats(history)
    absent_number = max(range(TOTAL_NUMBERS), key=lambda n: (gap_stats[n], -n))

    expected = total / TOTAL_NUMBERS
    heatmap = []
    for num in range(TOTAL_NUMBERS):
        ratio = counts[num] / max(0.01, expected)
        heatmap.append({
            'number': num,
            'count': int(counts[num]),
            'ratio': round(float(ratio), 2),
            'hot': bool(ratio > HOT_RATIO),
            'cold': bool(ratio < COLD_RATIO and total > 15),
        })

    nz_total = len(nonzero)
    red_pct = red / total * 100
    even_pct = even / nz_total * 100 if nz_total else 0.0
    low_pct = low / nz_total * 100 if nz_total else 0.0
    zero_pct = zero / total * 100
    trends = [
        {'label': 'RED %', 'value': round_half_up(red_pct), 'expected': 48.6},
        {'label': 'EVEN %', 'value': round_half_up(even_pct), 'expected': 50.0},
        {'label': '1-18 %', 'value': round_half_up(low_pct), 'expected': 50.0},
        {'label': 'ZERO %', 'value': round_half_up(zero_pct), 'expected': 2.7},
    ]
    for cell in trends:
        cell['direction'] = _direction(cell['value'], cell['expected'], SUMMARY_TREND_TOLERANCE)

    return {
        'available': True,
        'total_spins': total,
        'frequency': [int(c) for c in counts],
        'hottest': {'number': hottest, 'count': int(counts[hottest])},
        'coldest': {'number': coldest, 'count': int(counts[coldest])},
        'longest_absence': {'number': absent_number, 'gap': gap_stats[absent_number]},
        'red_count': red,
        'black_count': black,
        'zero_count': zero,
        'zero_pct': round(zero_pct, 1),
        'even_count': even,
        'odd_count': nz_total - even,
        'low_count': low,
        'high_count': nz_total - low,
        'bias': get_bias_report(history),
        'trends': trends,
        'heatmap': heatmap,
        'chi_square': get_chi_square_result(history),
    }
