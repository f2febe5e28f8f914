#!/usr/bin/env python3
"""
European Roulette Consensus Predictor - Entry Point
Start the Flask + SocketIO server.
"""

import os
import sys

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import HOST, PORT, DEBUG, DATA_DIR, STATE_PATH

os.makedirs(DATA_DIR, exist_ok=True)

from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    session = app.extensions['roulette_session']
    print("=" * 60)
    print("  European Roulette Consensus Predictor")
    print("=" * 60)
    print(f"[Startup] Server:     http://localhost:{PORT}")
    print(f"[Startup] State file: {STATE_PATH}")
    print(f"[Startup] Restored:   {len(session.history)} spins, "
          f"{session.agent.state_count()} Q-states")
    print(f"[Startup] Debug:      {DEBUG}")
    print("=" * 60)
    print()

    socketio.run(app, host=HOST, port=PORT, debug=DEBUG, use_reloader=False)
