"""
Session Manager - owns the spin history and the learning agent for one
table session, and exposes everything the dashboard needs: spin input,
predictions, strategy breakdown, agent view, statistics and CSV export.

History and agent are reset together; nothing here is process-global, so
several sessions can live side by side (one per app / test).
"""

import csv
import io

import sys
sys.path.insert(0, '.')
from config import (
    TOTAL_NUMBERS, PREDICTION_MIN_SPINS, AGENT_MIN_SPINS, AGENT_TOP_ACTIONS,
    AGENT_TREND_WINDOW,
)
from app.ml.bet_categories import score_categories
from app.ml.classifier import (
    color, color_code, parity_label, range_label, dozen, column_of,
    is_even, is_valid_number, round_half_up,
)
from app.ml.ensemble import ConsensusEngine
from app.ml.frequency_analyzer import get_summary
from app.ml.q_agent import QLearningAgent, ACTION_LABELS, encode_state

CSV_HEADER = ['Spin', 'Number', 'Color', 'OddEven', 'Range', 'Dozen', 'Column']


class SessionManager:
    def __init__(self, store=None, rng=None, agent=None, engine=None):
        self.store = store
        self.history = []
        self.agent = agent or QLearningAgent(rng=rng)
        self.engine = engine or ConsensusEngine()

    # ─── Persistence ────────────────────────────────────────────────

    def load(self):
        """Restore history and agent from the store (if any)."""
        if self.store is None:
            return False
        history, qtable, epsilon, updates = self.store.load()
        self.history = list(history)
        self.agent.load_state(qtable, epsilon, updates)
        self._sync_agent()
        return bool(self.history)

    def save(self):
        if self.store is None:
            return False
        state = self.agent.get_state()
        return self.store.save(self.history, state['qtable'], state['epsilon'], state['updates'])

    def _sync_agent(self):
        if len(self.history) >= AGENT_MIN_SPINS:
            self.agent.ensure_trained(self.history)

    # ─── Input boundary ─────────────────────────────────────────────

    def add_spin(self, number):
        """Record a spin. Values outside 0-36 are ignored (returns False)."""
        if not is_valid_number(number):
            return False
        # The agent learns from the pre-spin state before the spin is appended
        self.agent.observe(self.history, number)
        self.history.append(number)
        self._sync_agent()
        self.save()
        return True

    def undo_last(self):
        """Remove and return the latest spin, or None if there is none."""
        if not self.history:
            return None
        removed = self.history.pop()
        self.save()
        return removed

    def remove_at(self, index):
        """Remove the spin at a 0-based position (manual correction)."""
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if not 0 <= index < len(self.history):
            return None
        removed = self.history.pop(index)
        self.save()
        return removed

    def load_history(self, numbers):
        """Bulk import: append valid numbers, skip the rest, retrain the agent."""
        accepted = [n for n in numbers if is_valid_number(n)]
        self.history.extend(accepted)
        self._sync_agent()
        self.save()
        print(f"[Session] Imported {len(accepted)} spins "
              f"({len(numbers) - len(accepted)} rejected)")
        return len(accepted)

    def reset(self):
        """Clear history and agent together."""
        self.history = []
        self.agent.reset()
        self.save()
        print("[Session] History and agent cleared")

    # ─── Presentation boundary ──────────────────────────────────────

    def get_state(self):
        return {
            'total_spins': len(self.history),
            'last_number': self.history[-1] if self.history else None,
            'recent': list(reversed(self.history[-20:])),
            'predictions_ready': len(self.history) >= PREDICTION_MIN_SPINS,
            'agent_ready': len(self.history) >= AGENT_MIN_SPINS,
        }

    def get_predictions(self):
        """Consensus ranking, category ranking and the agent's top pick."""
        if len(self.history) < PREDICTION_MIN_SPINS:
            return {
                'available': False,
                'total_spins': len(self.history),
                'needed': PREDICTION_MIN_SPINS,
            }

        consensus = self.engine.run(self.history)
        categories = score_categories(consensus.top_numbers, self.history)

        state = encode_state(self.history)
        top = self.agent.best_actions(state, 1)[0]
        agent_confidence = min(99, max(1, round_half_up((top['q_value'] + 1) / 2 * 100)))

        return {
            'available': True,
            'total_spins': len(self.history),
            'predictions': consensus.to_dict()['predictions'],
            'active_count': consensus.active_count,
            'strategy_count': len(consensus.outcomes),
            'coverage_pct': round_half_up(len(consensus.predictions) / TOTAL_NUMBERS * 100),
            'categories': [c.to_dict() for c in categories],
            'agent_pick': {
                'action': top['action'],
                'label': ACTION_LABELS[top['action']],
                'q_value': round(top['q_value'], 4),
                'confidence': agent_confidence,
            },
        }

    def get_strategy_report(self):
        outcomes = self.engine.evaluate(self.history)
        return {
            'total_spins': len(self.history),
            'active_count': sum(1 for o in outcomes.values() if o.available),
            'strategies': [o.to_dict() for o in outcomes.values()],
        }

    def get_agent_status(self, top_n=AGENT_TOP_ACTIONS):
        if len(self.history) < AGENT_MIN_SPINS:
            return {
                'available': False,
                'total_spins': len(self.history),
                'needed': AGENT_MIN_SPINS,
            }

        self.agent.ensure_trained(self.history)
        state = encode_state(self.history)
        actions = self.agent.best_actions(state, top_n)

        last3 = self.history[-3:]
        recent = self.history[-AGENT_TREND_WINDOW:]
        nonzero = [n for n in recent if n != 0]
        average_q = self.agent.average_q()

        return {
            'available': True,
            'state': state,
            'last3': list(last3),
            'colours': ''.join(color_code(n).upper() for n in last3),
            'red_rate': round_half_up(sum(1 for n in recent if color(n) == 'red') / len(recent) * 100),
            'even_rate': round_half_up(sum(1 for n in nonzero if is_even(n)) / max(1, len(nonzero)) * 100),
            'actions': [{
                'action': a['action'],
                'label': ACTION_LABELS[a['action']],
                'q_value': round(a['q_value'], 4),
            } for a in actions],
            'states_learned': self.agent.state_count(),
            'epsilon': round(self.agent.epsilon, 4),
            'updates': self.agent.updates,
            'average_q': round(average_q, 4) if average_q is not None else None,
        }

    def get_summary(self):
        return get_summary(self.history)

    # ─── Export boundary ────────────────────────────────────────────

    def export_rows(self):
        """(spin #, number, colour, parity, range, dozen, column) per spin."""
        return [
            (i + 1, n, color(n), parity_label(n), range_label(n), dozen(n), column_of(n))
            for i, n in enumerate(self.history)
        ]

    def export_csv(self):
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator='\n')
        writer.writerow(CSV_HEADER)
        dozen_names = {0: '—', 1: '1st', 2: '2nd', 3: '3rd'}
        for index, n, colour, parity, rng, dz, col in self.export_rows():
            writer.writerow([
                index, n, colour.title(),
                parity.title() if parity else '—',
                {'low': '1-18', 'high': '19-36'}.get(rng, '—'),
                dozen_names[dz],
                f'Col{col}' if col else '—',
            ])
        return buf.getvalue()
