"""
Unit Tests for the prediction pipeline: outcome classifier, the 12
strategies, the consensus engine, bet category scoring and session
statistics.
"""
import pytest
import random
import sys
import os

# Add project root to path
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), '..')
sys.path.insert(0, PROJECT_ROOT)

from config import TOTAL_NUMBERS, RED_NUMBERS, BLACK_NUMBERS, DOZENS, WHEEL_ORDER
from app.ml.classifier import (
    color, color_code, is_even, is_odd, is_low, is_high, dozen, column_of,
    parity_label, range_label, wheel_neighbours, is_valid_number, round_half_up,
)
from app.ml.frequency_analyzer import hot_numbers, cold_numbers, get_summary
from app.ml.gap_analyzer import gap_analysis, get_gap_stats
from app.ml.pattern_detector import (
    pattern_repeat, colour_streak, dozen_rotation, column_cycle,
    even_odd_shift, high_low_balance,
)
from app.ml.wheel_strategy import (
    wheel_sector_bias, recency_cluster, fibonacci_positions, sector_around,
)
from app.ml.results import OutcomeStatus, StrategyResult
from app.ml.strategies import Strategy, STRATEGY_FUNCTIONS, evaluate_strategy
from app.ml.ensemble import ConsensusEngine, prediction_count, normalised_confidence
from app.ml.bet_categories import (
    FIXED_GROUPS,
    LINES, CORNERS, SPLITS, best_line, best_corner, best_split,
    due_bonuses, score_categories, coverage_score,
)


# Hardcoded subset of real wheel data
SAMPLE_DATA = [18, 26, 28, 35, 16, 28, 22, 35, 1, 20, 3, 35, 20, 23, 7, 24, 22, 2, 33, 35,
               12, 30, 27, 11, 9, 10, 9, 20, 16, 31, 4, 3, 16, 20, 34, 13, 28, 3, 15, 33,
               12, 11, 26, 23, 15, 36, 1, 25, 28, 32, 14, 6, 12, 16, 3, 6, 1, 35, 18, 8,
               30, 21, 29, 4, 8, 28, 1, 30, 4, 10, 30, 23, 36, 29, 28, 13, 3, 34, 9, 31]

SEVENTEENS = [17] * 6


# ═══════════════════════════════════════════════════════════════
# Outcome Classifier
# ═══════════════════════════════════════════════════════════════

class TestClassifier:
    def test_colours(self):
        assert color(0) == 'green'
        assert all(color(n) == 'red' for n in RED_NUMBERS)
        assert all(color(n) == 'black' for n in BLACK_NUMBERS)
        assert color_code(17) == 'b'

    def test_zero_has_no_table_attributes(self):
        assert not is_even(0)
        assert not is_odd(0)
        assert not is_low(0) and not is_high(0)
        assert dozen(0) == 0
        assert column_of(0) == 0
        assert parity_label(0) is None
        assert range_label(0) is None

    def test_dozens_and_columns(self):
        assert dozen(12) == 1
        assert dozen(13) == 2
        assert dozen(36) == 3
        assert column_of(34) == 1
        assert column_of(17) == 2
        assert column_of(36) == 3

    def test_every_number_in_one_colour_parity_range(self):
        for n in range(1, TOTAL_NUMBERS):
            assert (color(n) == 'red') != (color(n) == 'black')
            assert is_even(n) != is_odd(n)
            assert is_low(n) != is_high(n)

    def test_wheel_neighbours_wrap(self):
        assert wheel_neighbours(0, 2) == [3, 26, 32, 15]
        assert wheel_neighbours(26, 1) == [3, 0]

    def test_neighbours_are_symmetric(self):
        for n in WHEEL_ORDER:
            for m in wheel_neighbours(n, 2):
                assert n in wheel_neighbours(m, 2)

    def test_valid_number(self):
        assert is_valid_number(0)
        assert is_valid_number(36)
        assert not is_valid_number(37)
        assert not is_valid_number(-1)
        assert not is_valid_number(True)
        assert not is_valid_number('5')
        assert not is_valid_number(None)

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.49) == 2


# ═══════════════════════════════════════════════════════════════
# Strategies
# ═══════════════════════════════════════════════════════════════

class TestFrequencyStrategies:
    def test_hot_numbers_needs_five_spins(self):
        assert hot_numbers([17] * 4) is None

    def test_hot_numbers_single_repeat(self):
        result = hot_numbers(SEVENTEENS)
        assert result.numbers[0] == 17
        assert len(result.numbers) == 12
        assert result.confidence == 90

    def test_hot_numbers_ratio_for_single_repeat(self):
        # 6 hits against an expectation of 6/37 is 37x
        assert '37.0x' in hot_numbers(SEVENTEENS).reasoning

    def test_cold_numbers(self):
        assert cold_numbers(list(range(1, 10))) is None
        result = cold_numbers(list(range(1, 11)))
        assert result.numbers == [0] + list(range(11, 22))
        assert result.confidence == 20

    def test_gap_analysis(self):
        assert gap_analysis(list(range(14))) is None
        result = gap_analysis(list(range(15)))
        assert result.numbers == list(range(15, 27))
        assert result.confidence == 76

    def test_gap_stats(self):
        gaps = get_gap_stats([5, 7, 5])
        assert gaps[5] == 0
        assert gaps[7] == 1
        assert gaps[0] == 3


class TestPatternStrategies:
    def test_pattern_repeat_needs_eight_spins(self):
        assert pattern_repeat([17] * 7) is None

    def test_pattern_repeat_inactive_on_six_repeats(self):
        assert pattern_repeat(SEVENTEENS) is None

    def test_pattern_repeat_on_repeats(self):
        result = pattern_repeat([17] * 10)
        assert result.numbers == [17]
        assert result.confidence == 80

    def test_pattern_repeat_without_earlier_match(self):
        assert pattern_repeat(list(range(10))) is None

    def test_pattern_repeat_falls_back_to_pairs(self):
        # [5, 9] occurs earlier followed by 1; the 3-step suffix [2, 5, 9] does not
        history = [5, 9, 1, 3, 4, 6, 8, 2, 5, 9]
        result = pattern_repeat(history)
        assert result.numbers == [1]
        assert '2-step' in result.reasoning

    def test_colour_streak_reversal(self):
        result = colour_streak(SEVENTEENS)
        assert result.numbers == sorted(RED_NUMBERS)
        assert result.confidence == 74

    def test_colour_streak_continuation(self):
        result = colour_streak([1, 2, 1, 2, 1])
        assert result.numbers == sorted(RED_NUMBERS)
        assert result.confidence == 31

    def test_dozen_rotation(self):
        result = dozen_rotation(list(range(1, 11)))
        assert result.numbers == DOZENS[2] + DOZENS[3]
        assert result.confidence == 42

    def test_dozen_rotation_ignores_zero(self):
        assert dozen_rotation([0] * 5 + [1, 2, 3, 4, 5]) is None

    def test_column_cycle(self):
        history = [1, 4, 7, 10, 13, 16, 19, 22, 25, 28, 31, 34]
        result = column_cycle(history)
        assert len(result.numbers) == 24
        assert 1 not in result.numbers
        assert result.confidence == 40

    def test_even_odd_shift_dominance(self):
        result = even_odd_shift([2, 4, 6, 8, 10, 12, 14, 16])
        assert result.numbers == list(range(1, 36, 2))
        assert result.confidence == 66

    def test_high_low_balance(self):
        result = high_low_balance(list(range(1, 11)))
        assert result.numbers == list(range(19, 37))
        assert result.confidence == 62


class TestWheelStrategies:
    def test_sector_bias(self):
        result = wheel_sector_bias(SEVENTEENS)
        assert result.numbers[0] == 17
        assert result.numbers == sector_around(17, 4)
        assert len(result.numbers) == 9
        assert result.confidence == 42

    def test_recency_cluster(self):
        result = recency_cluster([0] * 5)
        assert result.numbers == [0, 3, 26, 32, 15]
        assert result.confidence == 43

    def test_recency_cluster_capped(self):
        result = recency_cluster([0, 10, 20, 30, 36])
        assert len(result.numbers) <= 15

    def test_fibonacci_twelve_unique(self):
        for last in range(TOTAL_NUMBERS):
            result = fibonacci_positions([5, 5, last])
            assert len(result.numbers) == 12
            assert len(set(result.numbers)) == 12
            assert last not in result.numbers

    def test_fibonacci_needs_three(self):
        assert fibonacci_positions([1, 2]) is None

    def test_fibonacci_confidence_is_unrounded(self):
        assert fibonacci_positions([1, 2, 3, 4, 5]).confidence == 16.25
        assert fibonacci_positions(list(range(37)) * 6).confidence == 52


class TestStrategyLibrary:
    def test_closed_set_of_twelve(self):
        assert len(Strategy) == 12
        assert set(STRATEGY_FUNCTIONS) == set(Strategy)
        assert Strategy.HOT_NUMBERS.label == 'Hot Numbers'

    def test_results_within_range(self):
        for strategy in Strategy:
            result = STRATEGY_FUNCTIONS[strategy](SAMPLE_DATA)
            if result is None:
                continue
            assert all(0 <= n <= 36 for n in result.numbers)
            assert len(result.numbers) == len(set(result.numbers))
            assert 0 <= result.confidence <= 100
            assert result.reasoning

    def test_result_dedupes(self):
        result = StrategyResult([3, 3, 1], 50, 'x')
        assert result.numbers == [3, 1]

    def test_fault_is_isolated(self):
        def broken(history):
            raise RuntimeError('boom')

        functions = dict(STRATEGY_FUNCTIONS)
        functions[Strategy.HOT_NUMBERS] = broken
        outcome = evaluate_strategy(Strategy.HOT_NUMBERS, SAMPLE_DATA, functions)
        assert outcome.status is OutcomeStatus.FAULTED
        assert 'boom' in outcome.error

    def test_out_of_range_numbers_fault(self):
        functions = dict(STRATEGY_FUNCTIONS)
        functions[Strategy.HOT_NUMBERS] = lambda h: StrategyResult([40], 50, 'bad')
        outcome = evaluate_strategy(Strategy.HOT_NUMBERS, SAMPLE_DATA, functions)
        assert outcome.status is OutcomeStatus.FAULTED

    def test_below_minimum_is_unavailable(self):
        outcome = evaluate_strategy(Strategy.COLD_NUMBERS, [1, 2, 3])
        assert outcome.status is OutcomeStatus.UNAVAILABLE
        assert outcome.to_dict()['status'] == 'inactive'


# ═══════════════════════════════════════════════════════════════
# Consensus Engine
# ═══════════════════════════════════════════════════════════════

class TestConsensusEngine:
    def test_prediction_count(self):
        assert prediction_count(5) == 5
        assert prediction_count(20) == 12
        assert prediction_count(50) == 16
        assert prediction_count(60) == 18

    def test_normalised_confidence(self):
        assert normalised_confidence(10, 10) == 92
        assert normalised_confidence(5, 10) == 52

    def test_repeated_number_is_ranked(self):
        result = ConsensusEngine().run(SEVENTEENS)
        assert result.active_count == 5
        assert result.predictions[0]['confidence'] == 92
        weights = [p['weight'] for p in result.predictions]
        assert weights == sorted(weights, reverse=True)
        seventeen = next(p for p in result.predictions if p['number'] == 17)
        # hot, sector and recency all include 17
        assert seventeen['vote_count'] == 3

    def test_prediction_size_bounds(self):
        for n in (5, 10, 30, 80):
            result = ConsensusEngine().run(SAMPLE_DATA[:n])
            assert 12 <= len(result.predictions) <= 18

    def test_ties_break_by_ascending_number(self):
        engine = ConsensusEngine(strategies=[Strategy.COLOUR_STREAK])
        result = engine.run(SEVENTEENS)
        assert result.top_numbers == sorted(RED_NUMBERS)[:12]
        assert all(p['confidence'] == 92 for p in result.predictions)

    def test_faulted_strategy_does_not_stop_others(self):
        def broken(history):
            raise ValueError('bad data')

        functions = dict(STRATEGY_FUNCTIONS)
        functions[Strategy.HOT_NUMBERS] = broken
        baseline = ConsensusEngine().run(SAMPLE_DATA)
        result = ConsensusEngine(functions=functions).run(SAMPLE_DATA)
        assert result.outcomes['Hot Numbers'].status is OutcomeStatus.FAULTED
        assert result.active_count == baseline.active_count - 1
        assert len(result.predictions) >= 12

    def test_idempotent_and_pure(self):
        history = list(SAMPLE_DATA)
        engine = ConsensusEngine()
        first = engine.run(history).to_dict()
        second = engine.run(history).to_dict()
        assert first == second
        assert history == SAMPLE_DATA

    def test_empty_history(self):
        result = ConsensusEngine().run([])
        assert result.predictions == []
        assert result.active_count == 0

    def test_outcomes_in_library_order(self):
        outcomes = ConsensusEngine().evaluate(SAMPLE_DATA)
        assert list(outcomes) == [s.label for s in Strategy]


# ═══════════════════════════════════════════════════════════════
# Bet Categories
# ═══════════════════════════════════════════════════════════════

class TestBetCategories:
    def test_board_positions(self):
        assert len(LINES) == 11
        assert len(CORNERS) == 22
        assert len(SPLITS) == 57
        assert LINES[-1] == [31, 32, 33, 34, 35, 36]
        assert CORNERS[0] == [1, 2, 4, 5]
        assert SPLITS[0] == [1, 2]

    def test_best_positions(self):
        assert best_line([1, 2, 3, 4, 5, 6]) == ([1, 2, 3, 4, 5, 6], 1.0)
        assert best_corner([32, 33, 35, 36]) == ([32, 33, 35, 36], 1.0)
        assert best_split([34, 35])[0] == [34, 35]

    def test_first_position_wins_ties(self):
        assert best_corner([]) == ([1, 2, 4, 5], 0.0)
        assert best_split([]) == ([1, 2], 0.0)

    def test_coverage_score(self):
        assert coverage_score([1, 2, 3, 4], [1, 2]) == 0.5
        assert coverage_score([], [1]) == 0.0

    def test_due_bonuses(self):
        bonuses = due_bonuses(SEVENTEENS)
        assert bonuses['red'] == 0.25
        assert bonuses['black'] == 0.0
        assert bonuses['even'] == 0.25
        assert bonuses['high'] == 0.25
        assert bonuses['low'] == 0.0
        # tie for least-hit dozen gets nothing
        assert bonuses['d1'] == bonuses['d2'] == bonuses['d3'] == 0.0

    def test_strictly_least_dozen_bonus(self):
        bonuses = due_bonuses([1, 13, 14, 25, 26])
        assert bonuses['d1'] == 0.20
        assert bonuses['d2'] == 0.0

    def test_fifteen_categories_ranked(self):
        top = ConsensusEngine().run(SAMPLE_DATA).top_numbers
        categories = score_categories(top, SAMPLE_DATA)
        assert len(categories) == 15
        assert {c.id for c in categories} >= {'red', 'd1', 'c3', 'line', 'corner', 'split'}
        scores = [c.score for c in categories]
        assert scores == sorted(scores, reverse=True)

    def test_category_dict(self):
        categories = score_categories([1, 2, 3, 4, 5, 6], [])
        line = next(c for c in categories if c.id == 'line')
        data = line.to_dict()
        assert data['label'] == 'Line 1-6'
        assert data['match_pct'] == 100
        assert data['payout'] == '5:1'


# ═══════════════════════════════════════════════════════════════
# Session Statistics
# ═══════════════════════════════════════════════════════════════

class TestSummary:
    def test_empty(self):
        assert get_summary([]) == {'total_spins': 0, 'available': False}

    def test_counts(self):
        summary = get_summary(SAMPLE_DATA)
        assert summary['available']
        assert summary['total_spins'] == len(SAMPLE_DATA)
        assert sum(summary['frequency']) == len(SAMPLE_DATA)
        assert summary['red_count'] + summary['black_count'] + summary['zero_count'] == len(SAMPLE_DATA)
        assert len(summary['heatmap']) == TOTAL_NUMBERS
        assert len(summary['bias']) == 9

    def test_chi_square(self):
        result = get_summary(SAMPLE_DATA)['chi_square']
        assert 0.0 <= result['p_value'] <= 1.0
        assert result['statistic'] >= 0.0

    def test_chi_square_detects_bias(self):
        result = get_summary([17] * 50)['chi_square']
        assert result['significant']


# ═══════════════════════════════════════════════════════════════
# Bounds over many histories
# ═══════════════════════════════════════════════════════════════

def _random_histories(count=100, seed=2024):
    rng = random.Random(seed)
    return [[rng.randrange(TOTAL_NUMBERS) for _ in range(rng.randint(5, 150))]
            for _ in range(count)]


RANDOM_HISTORIES = _random_histories()

EXPECTED_COVERAGE = {
    'COLOUR': 48.6, 'PARITY': 48.6, 'RANGE': 48.6,
    'DOZEN': 32.4, 'COLUMN': 32.4,
    'LINE(6)': 16.2, 'CORNER(4)': 10.8, 'SPLIT(2)': 5.4,
}
FIXED_IDS = {gid for gid, _, _, _, _ in FIXED_GROUPS}


class TestBoundsAcrossHistories:
    def test_consensus_confidence_bounds(self):
        engine = ConsensusEngine()
        for history in RANDOM_HISTORIES:
            result = engine.run(history)
            assert 12 <= len(result.predictions) <= 18
            for p in result.predictions:
                assert 12 <= p['confidence'] <= 99
            assert result.predictions[0]['confidence'] == 92

    def test_category_scores_and_coverage(self):
        engine = ConsensusEngine()
        for history in RANDOM_HISTORIES[:40]:
            top = engine.run(history).top_numbers
            categories = score_categories(top, history)
            assert len(categories) == 15
            for c in categories:
                assert c.coverage == EXPECTED_COVERAGE[c.group]
                if c.id in FIXED_IDS:
                    assert 0.0 <= c.score <= 1.25
                else:
                    assert 0.0 <= c.score <= 1.0

    def test_strategy_confidence_within_ceiling(self):
        for history in RANDOM_HISTORIES:
            for strategy in Strategy:
                result = STRATEGY_FUNCTIONS[strategy](history)
                if result is not None:
                    assert 0 <= result.confidence <= 100
                    assert all(0 <= n <= 36 for n in result.numbers)
