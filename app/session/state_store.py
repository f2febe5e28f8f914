"""
State Store - persists the spin history and the learned Q-table to a
single JSON file so a restart picks up where the last session stopped.
"""

import os
import json
from datetime import datetime

import sys
sys.path.insert(0, '.')
from config import STATE_PATH, STATE_VERSION, AGENT_EPSILON


def default_state():
    return [], {}, AGENT_EPSILON, 0


class StateStore:
    def __init__(self, path=STATE_PATH):
        self.path = path

    def load(self):
        """Return (history, qtable, epsilon, updates).

        Missing, unreadable or unknown-version files give the defaults.
        """
        if not os.path.exists(self.path):
            print("[State] No saved state found")
            return default_state()

        try:
            with open(self.path, 'r') as f:
                state = json.load(f)

            if state.get('version') != STATE_VERSION:
                print(f"[State] Unknown state version {state.get('version')}, ignoring")
                return default_state()

            history = [int(n) for n in state['history'] if 0 <= int(n) <= 36]
            qtable = {
                str(s): {str(a): float(v) for a, v in row.items()}
                for s, row in state['qtable'].items()
            }
            epsilon = float(state['epsilon'])
            updates = int(state['updates'])
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            print(f"[State] Failed to load: {e}")
            return default_state()

        print(f"[State] Loaded {len(history)} spins, {len(qtable)} Q-states")
        return history, qtable, epsilon, updates

    def save(self, history, qtable, epsilon, updates):
        """Write atomically (temp file + rename). Returns True on success."""
        state = {
            'version': STATE_VERSION,
            'saved_at': datetime.now().isoformat(),
            'history': [int(n) for n in history],
            'qtable': qtable,
            'epsilon': float(epsilon),
            'updates': int(updates),
        }
        tmp_path = self.path + '.tmp'
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w') as f:
                json.dump(state, f)
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            print(f"[State] Failed to save: {e}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False
