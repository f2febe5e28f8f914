"""
Q-Learning Agent - tabular agent that learns which bet category tends to
pay off in which recent-trend context.

State: colours and dozens of the last 3 results plus red/even/dozen trend
bits over the last 8 (see `encode_state`).
Actions: the 18 bet categories in `ACTIONS`.
Reward: +1 if the chosen category covers the next result, -0.1 otherwise.

The table is trained by replaying the whole history (epsilon-greedy) and
then updated live after every new spin using the agent's own greedy pick.
"""

import random
from collections import OrderedDict

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS,
    AGENT_ALPHA, AGENT_GAMMA, AGENT_EPSILON, AGENT_EPSILON_MIN, AGENT_EPSILON_DECAY,
    AGENT_REWARD_HIT, AGENT_REWARD_MISS,
    AGENT_STATE_MIN_SPINS, AGENT_TREND_WINDOW, AGENT_TRAIN_OFFSET,
    AGENT_LIVE_MIN_SPINS, AGENT_RETRAIN_MARGIN,
    AGENT_HOT_WINDOW, AGENT_SECTOR_RADIUS, STRATEGY_PICK_COUNT,
    QTABLE_MAX_STATES,
)
from app.ml.bet_categories import FIXED_NUMBERS, best_line, best_corner, best_split
from app.ml.classifier import color, color_code, is_even, dozen
from app.ml.wheel_strategy import sector_around, fibonacci_pockets

INIT_STATE = 'INIT'

ACTIONS = (
    'red', 'black', 'even', 'odd', 'low', 'high',
    'd1', 'd2', 'd3', 'c1', 'c2', 'c3',
    'line', 'corner', 'split', 'hot12', 'sector', 'fibonacci',
)

ACTION_LABELS = {
    'red': 'Red (18)', 'black': 'Black (18)', 'even': 'Even (18)', 'odd': 'Odd (18)',
    'low': 'Low 1-18', 'high': 'High 19-36',
    'd1': '1st Dozen', 'd2': '2nd Dozen', 'd3': '3rd Dozen',
    'c1': 'Column 1', 'c2': 'Column 2', 'c3': 'Column 3',
    'line': 'Best Line (6)', 'corner': 'Best Corner (4)', 'split': 'Best Split (2)',
    'hot12': 'Hot 12', 'sector': 'Wheel Sector', 'fibonacci': 'Fibonacci Positions',
}


def encode_state(history):
    """Compact trend key, e.g. 'rbb|132|HE1'.

    colours of the last 3 | dozens of the last 3 | red trend (H/L),
    even trend (E/O), hottest dozen in the last 8 (lowest dozen on ties).
    """
    if len(history) < AGENT_STATE_MIN_SPINS:
        return INIT_STATE

    last3 = history[-3:]
    colours = ''.join(color_code(n) for n in last3)
    dozens = ''.join(str(dozen(n)) for n in last3)

    recent = history[-AGENT_TREND_WINDOW:]
    half = AGENT_TREND_WINDOW // 2
    red_trend = 'H' if sum(1 for n in recent if color(n) == 'red') > half else 'L'
    even_trend = 'E' if sum(1 for n in recent if n != 0 and is_even(n)) > half else 'O'
    dozen_counts = [sum(1 for n in recent if dozen(n) == d) for d in (1, 2, 3)]
    hot_dozen = dozen_counts.index(max(dozen_counts)) + 1

    return f'{colours}|{dozens}|{red_trend}{even_trend}{hot_dozen}'


def hot_twelve(history):
    """12 most frequent numbers in the last 50 (ascending number on ties)."""
    counts = np.bincount(np.asarray(history[-AGENT_HOT_WINDOW:], dtype=np.int64),
                         minlength=TOTAL_NUMBERS)
    return [int(n) for n in np.argsort(-counts, kind='stable')[:STRATEGY_PICK_COUNT]]


def action_coverage(history):
    """Numbers each action would cover, given the spins seen so far."""
    coverage = {gid: list(nums) for gid, nums in FIXED_NUMBERS.items()}
    hot = hot_twelve(history)
    coverage['hot12'] = hot
    coverage['line'] = best_line(hot)[0]
    coverage['corner'] = best_corner(hot)[0]
    coverage['split'] = best_split(hot)[0]
    if history:
        last = history[-1]
        coverage['sector'] = sector_around(last, AGENT_SECTOR_RADIUS)
        coverage['fibonacci'] = fibonacci_pockets(last)
    else:
        coverage['sector'] = []
        coverage['fibonacci'] = []
    return coverage


class QLearningAgent:
    def __init__(self, alpha=AGENT_ALPHA, gamma=AGENT_GAMMA, epsilon=AGENT_EPSILON,
                 epsilon_min=AGENT_EPSILON_MIN, epsilon_decay=AGENT_EPSILON_DECAY,
                 max_states=QTABLE_MAX_STATES, rng=None):
        self.alpha = alpha
        self.gamma = gamma
        self.initial_epsilon = epsilon
        self.epsilon_min = epsilon_min
        self.epsilon_decay = epsilon_decay
        self.max_states = max_states
        self.rng = rng or random.Random()
        self._qtable = OrderedDict()
        self._epsilon = epsilon
        self._updates = 0
        self._retrain_requested = False

    # ─── Read-only views ────────────────────────────────────────────

    @property
    def epsilon(self):
        return self._epsilon

    @property
    def updates(self):
        return self._updates

    @property
    def qtable(self):
        """Deep copy of the table; writes only happen through learn()."""
        return {state: dict(values) for state, values in self._qtable.items()}

    def q_value(self, state, action):
        return self._qtable.get(state, {}).get(action, 0.0)

    def state_count(self):
        return len(self._qtable)

    def average_q(self):
        values = [v for row in self._qtable.values() for v in row.values()]
        if not values:
            return None
        return sum(values) / len(values)

    def best_actions(self, state, top_n=5):
        """Highest Q first; sorted() is stable so ties keep ACTIONS order."""
        ranked = sorted(
            ({'action': a, 'q_value': self.q_value(state, a)} for a in ACTIONS),
            key=lambda item: -item['q_value'],
        )
        return ranked[:top_n]

    # ─── Learning ───────────────────────────────────────────────────

    def learn(self, state, action, reward, next_state):
        """Bellman update for one transition, then decay exploration."""
        max_next = max(self.q_value(next_state, a) for a in ACTIONS)
        current = self.q_value(state, action)

        row = self._qtable.get(state)
        if row is None:
            row = self._qtable[state] = {}
        row[action] = current + self.alpha * (reward + self.gamma * max_next - current)
        self._qtable.move_to_end(state)
        if self.max_states is not None:
            while len(self._qtable) > self.max_states:
                self._qtable.popitem(last=False)

        self._updates += 1
        self._epsilon = max(self.epsilon_min, self._epsilon * self.epsilon_decay)

    def choose_action(self, state):
        """Epsilon-greedy choice used during replay training."""
        if self.rng.random() < self._epsilon:
            return ACTIONS[self.rng.randrange(len(ACTIONS))]
        return self.best_actions(state, 1)[0]['action']

    def _reward(self, history, action, outcome):
        covered = action_coverage(history)[action]
        return AGENT_REWARD_HIT if outcome in covered else AGENT_REWARD_MISS

    def train(self, history):
        """Replay every transition in history once.

        Transition i uses the first i spins as context and history[i] as the
        result, for i = 3 .. len - 2, i.e. max(0, len - 4) updates.
        """
        history = list(history)
        for i in range(AGENT_TRAIN_OFFSET, len(history) - 1):
            context = history[:i]
            state = encode_state(context)
            next_state = encode_state(history[:i + 1])
            action = self.choose_action(state)
            self.learn(state, action, self._reward(context, action, history[i]), next_state)
        self._retrain_requested = False

    def observe(self, history, outcome):
        """Live update for a new spin, taken before `outcome` is appended.

        Scores the agent's current greedy pick for the pre-spin state.
        Returns the action that was evaluated, or None if too early.
        """
        history = list(history)
        if len(history) < AGENT_LIVE_MIN_SPINS:
            return None
        state = encode_state(history)
        next_state = encode_state(history + [outcome])
        action = self.best_actions(state, 1)[0]['action']
        self.learn(state, action, self._reward(history, action, outcome), next_state)
        return action

    def needs_training(self, history_length):
        if history_length < AGENT_LIVE_MIN_SPINS:
            return False
        return self._retrain_requested or self._updates < history_length - AGENT_RETRAIN_MARGIN

    def ensure_trained(self, history):
        """Retrain from an empty table when the table lags the history."""
        if not self.needs_training(len(history)):
            return False
        print(f"[Agent] Retraining on {len(history)} spins "
              f"(updates={self._updates}, reset={self._retrain_requested})")
        self._clear()
        self.train(history)
        return True

    # ─── Lifecycle ──────────────────────────────────────────────────

    def _clear(self):
        self._qtable = OrderedDict()
        self._epsilon = self.initial_epsilon
        self._updates = 0

    def reset(self):
        """Empty table, initial epsilon, zero updates; next use retrains."""
        self._clear()
        self._retrain_requested = True

    def get_state(self):
        return {
            'qtable': self.qtable,
            'epsilon': self._epsilon,
            'updates': self._updates,
        }

    def load_state(self, qtable, epsilon, updates):
        self._qtable = OrderedDict(
            (str(state), {str(a): float(v) for a, v in row.items()})
            for state, row in (qtable or {}).items()
        )
        if self.max_states is not None:
            while len(self._qtable) > self.max_states:
                self._qtable.popitem(last=False)
        self._epsilon = max(self.epsilon_min, min(self.initial_epsilon, float(epsilon)))
        self._updates = max(0, int(updates))
        self._retrain_requested = False
