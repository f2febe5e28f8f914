"""
Wheel Strategy Analyzer — strategies based on the physical wheel layout.

  1. Wheel Sector Bias: hottest pocket cluster in the last 30 spins
  2. Recency Cluster: last 5 results plus their wheel neighbours
  3. Fibonacci Positions: Fibonacci-spaced pockets from the last result

All three work on wheel adjacency, not numeric adjacency: 32 sits next
to 0 and 15, not next to 31 and 33.
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, WHEEL_ORDER,
    SECTOR_WINDOW, SECTOR_MIN_SPINS, SECTOR_SCORE_RADIUS, SECTOR_SPREAD_RADIUS,
    RECENCY_MIN_SPINS, RECENCY_COUNT, RECENCY_RADIUS, RECENCY_MAX_NUMBERS,
    FIBONACCI_MIN_SPINS, FIBONACCI_OFFSETS, STRATEGY_PICK_COUNT,
)
from app.ml.classifier import wheel_neighbours, wheel_position, round_half_up
from app.ml.results import StrategyResult


def sector_around(number, radius=SECTOR_SPREAD_RADIUS):
    """The pocket itself followed by its ±radius wheel neighbours."""
    return list(dict.fromkeys([number] + wheel_neighbours(number, radius)))


def fibonacci_pockets(number):
    """Pockets at Fibonacci offsets clockwise, then anticlockwise, from number."""
    pos = wheel_position(number)
    size = len(WHEEL_ORDER)
    forward = [WHEEL_ORDER[(pos + f) % size] for f in FIBONACCI_OFFSETS]
    backward = [WHEEL_ORDER[(pos - f) % size] for f in FIBONACCI_OFFSETS]
    return list(dict.fromkeys(forward + backward))


def wheel_sector_bias(history):
    window = history[-SECTOR_WINDOW:]
    if len(window) < SECTOR_MIN_SPINS:
        return None

    counts = np.bincount(np.asarray(window, dtype=np.int64), minlength=TOTAL_NUMBERS)
    scores = np.array([
        counts[n] * 2 + sum(counts[x] for x in wheel_neighbours(n, SECTOR_SCORE_RADIUS))
        for n in range(TOTAL_NUMBERS)
    ])
    centre = int(np.argsort(-scores, kind='stable')[0])
    sector = sector_around(centre, SECTOR_SPREAD_RADIUS)[:RECENCY_MAX_NUMBERS]

    return StrategyResult(
        numbers=sector,
        confidence=min(85, round_half_up(36 + len(window))),
        reasoning=(f"Hottest wheel sector centred on pocket {centre} "
                   f"(pos {wheel_position(centre)}). Includes ±{SECTOR_SPREAD_RADIUS} "
                   f"physical neighbours. Ball may be landing in this arc."),
    )


def recency_cluster(history):
    if len(history) < RECENCY_MIN_SPINS:
        return None

    recent = list(history[-RECENCY_COUNT:])
    cluster = []
    for n in recent:
        cluster.append(n)
        cluster.extend(wheel_neighbours(n, RECENCY_RADIUS))
    numbers = list(dict.fromkeys(cluster))[:RECENCY_MAX_NUMBERS]

    return StrategyResult(
        numbers=numbers,
        confidence=min(58, 18 + len(recent) * 5),
        reasoning=(f"Last {len(recent)} results {recent} plus their ±{RECENCY_RADIUS} "
                   f"physical wheel neighbours. Recent zone momentum."),
    )


def fibonacci_positions(history):
    if len(history) < FIBONACCI_MIN_SPINS:
        return None

    last = history[-1]
    numbers = fibonacci_pockets(last)[:STRATEGY_PICK_COUNT]

    return StrategyResult(
        numbers=numbers,
        confidence=min(52, 15 + len(history) / 4),
        reasoning=(f"Fibonacci-spaced pockets from {last} (pos {wheel_position(last)}) "
                   f"on the physical wheel. Offsets ±{list(FIBONACCI_OFFSETS)}."),
    )
