"""
Configuration constants for the Roulette Consensus Predictor.
Single source of truth for all tunable parameters.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ─── European Roulette Wheel Layout ──────────────────────────────────
# Physical wheel order (clockwise from 0)
WHEEL_ORDER = [
    0, 32, 15, 19, 4, 21, 2, 25, 17, 34, 6, 27, 13, 36,
    11, 30, 8, 23, 10, 5, 24, 16, 33, 1, 20, 14, 31, 9,
    22, 18, 29, 7, 28, 12, 35, 3, 26
]

# Number to wheel position mapping
NUMBER_TO_POSITION = {num: idx for idx, num in enumerate(WHEEL_ORDER)}

TOTAL_NUMBERS = 37  # 0-36

# Number properties (ordered lists: member order is the board order)
RED_NUMBERS = [1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36]
BLACK_NUMBERS = [2, 4, 6, 8, 10, 11, 13, 15, 17, 20, 22, 24, 26, 28, 29, 31, 33, 35]

FIRST_DOZEN = list(range(1, 13))
SECOND_DOZEN = list(range(13, 25))
THIRD_DOZEN = list(range(25, 37))
DOZENS = {1: FIRST_DOZEN, 2: SECOND_DOZEN, 3: THIRD_DOZEN}

FIRST_COLUMN = [1, 4, 7, 10, 13, 16, 19, 22, 25, 28, 31, 34]
SECOND_COLUMN = [2, 5, 8, 11, 14, 17, 20, 23, 26, 29, 32, 35]
THIRD_COLUMN = [3, 6, 9, 12, 15, 18, 21, 24, 27, 30, 33, 36]
COLUMNS = {1: FIRST_COLUMN, 2: SECOND_COLUMN, 3: THIRD_COLUMN}


# ─── Strategy Windows & Minimum Data ─────────────────────────────────
# Each strategy stays inactive (returns None) below its minimum.
HOT_WINDOW = 50
HOT_MIN_SPINS = 5
COLD_WINDOW = 80
COLD_MIN_SPINS = 10
SECTOR_WINDOW = 30
SECTOR_MIN_SPINS = 6
SECTOR_SCORE_RADIUS = 2             # Neighbours counted when scoring a pocket
SECTOR_SPREAD_RADIUS = 4            # Neighbours included around the winning pocket
PATTERN_MIN_SPINS = 8
PATTERN_SEQUENCE_LENGTHS = (3, 2)   # Longest suffix first, then fallback
COLOUR_STREAK_MIN_SPINS = 5
COLOUR_REVERSAL_STREAK = 3          # Streak length that flips to a reversal call
DOZEN_MIN_SPINS = 10
DOZEN_MIN_NONZERO = 6
DOZEN_WINDOW = 24
GAP_MIN_SPINS = 15
GAP_UNSEEN_PENALTY = 99             # Never-seen numbers rank as absent for len + 99
EVEN_ODD_MIN_SPINS = 8
EVEN_ODD_MIN_NONZERO = 6
EVEN_ODD_WINDOW = 20
EVEN_ODD_UPPER = 0.65
EVEN_ODD_LOWER = 0.35
HIGH_LOW_MIN_SPINS = 10
HIGH_LOW_MIN_NONZERO = 8
HIGH_LOW_WINDOW = 24
HIGH_LOW_UPPER = 0.6
HIGH_LOW_LOWER = 0.4
COLUMN_MIN_SPINS = 12
COLUMN_MIN_NONZERO = 8
COLUMN_WINDOW = 30
RECENCY_MIN_SPINS = 5
RECENCY_COUNT = 5                   # Last N outcomes expanded on the wheel
RECENCY_RADIUS = 2
RECENCY_MAX_NUMBERS = 15
FIBONACCI_MIN_SPINS = 3
FIBONACCI_OFFSETS = (1, 1, 2, 3, 5, 8, 13)
STRATEGY_PICK_COUNT = 12            # Numbers returned by list-style strategies

# ─── Consensus ───────────────────────────────────────────────────────
CONSENSUS_SPECIFICITY_BASE = 12     # weight = confidence * (12 / picks)
CONSENSUS_MIN_PREDICTIONS = 12
CONSENSUS_MAX_PREDICTIONS = 18
CONSENSUS_SHARE = 0.32              # Share of voted numbers kept before clamping
CONSENSUS_CONFIDENCE_SCALE = 80
CONSENSUS_CONFIDENCE_FLOOR = 12
CONSENSUS_CONFIDENCE_CAP = 99

# ─── Bet Categories ──────────────────────────────────────────────────
CATEGORY_BIAS_WINDOW = 20           # Trailing window for "due" bonuses
CATEGORY_EVEN_MONEY_BONUS = 0.25
CATEGORY_DOZEN_BONUS = 0.20
CATEGORY_LOW_RATE = 0.4
CATEGORY_HIGH_RATE = 0.6

# Payout ratio and theoretical coverage (% of 37 pockets) per bet size
PAYOUTS = {
    'even_money': '1:1',
    'dozen': '2:1',
    'column': '2:1',
    'six_line': '5:1',
    'corner': '8:1',
    'split': '17:1',
}
COVERAGE = {
    'even_money': 48.6,
    'dozen': 32.4,
    'column': 32.4,
    'six_line': 16.2,
    'corner': 10.8,
    'split': 5.4,
}

# ─── Q-Learning Agent ────────────────────────────────────────────────
AGENT_ALPHA = 0.15                  # Learning rate
AGENT_GAMMA = 0.90                  # Discount factor
AGENT_EPSILON = 0.90                # Initial exploration rate
AGENT_EPSILON_MIN = 0.05            # Exploration floor
AGENT_EPSILON_DECAY = 0.97          # Multiplicative decay per update
AGENT_REWARD_HIT = 1.0
AGENT_REWARD_MISS = -0.1
AGENT_STATE_MIN_SPINS = 3           # Below this the state is 'INIT'
AGENT_TREND_WINDOW = 8              # Window for red/even/dozen trend bits
AGENT_TRAIN_OFFSET = 3              # First replayed transition index
AGENT_LIVE_MIN_SPINS = 4            # Live updates need this much pre-outcome history
AGENT_RETRAIN_MARGIN = 4            # Retrain when updates < len(history) - margin
AGENT_HOT_WINDOW = 50
AGENT_SECTOR_RADIUS = 4
AGENT_TOP_ACTIONS = 6
QTABLE_MAX_STATES = None            # None = unbounded; int = evict least recently written state

# ─── Activation Gates ────────────────────────────────────────────────
PREDICTION_MIN_SPINS = 5
AGENT_MIN_SPINS = 8

# ─── Summary Statistics ──────────────────────────────────────────────
SUMMARY_BIAS_WINDOW = 20
SUMMARY_BIAS_TOLERANCE = 5.0        # Percentage points before ▲/▼ is shown
SUMMARY_TREND_TOLERANCE = 3.0
HOT_RATIO = 1.5
COLD_RATIO = 0.5

# ─── File Paths ───────────────────────────────────────────────────────
DATA_DIR = os.path.join(BASE_DIR, 'data')
STATE_PATH = os.path.join(DATA_DIR, 'roulette_state.json')
STATE_VERSION = 1

# ─── Server Settings ─────────────────────────────────────────────────
HOST = '0.0.0.0'
PORT = 5050
DEBUG = False
SECRET_KEY = 'roulette-consensus-predictor'
SOCKETIO_ASYNC_MODE = 'eventlet'
