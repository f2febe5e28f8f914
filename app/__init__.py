"""
Flask Application Factory with SocketIO initialization.
"""

from flask import Flask
from flask_socketio import SocketIO

import sys
sys.path.insert(0, '.')
from config import SECRET_KEY, STATE_PATH, SOCKETIO_ASYNC_MODE

socketio = SocketIO()


def create_app(state_path=STATE_PATH, async_mode=None, session=None):
    """Build the app with one SessionManager attached.

    state_path=None keeps the session in memory only.
    """
    from app.session.session_manager import SessionManager
    from app.session.state_store import StateStore

    app = Flask(__name__)
    app.config['SECRET_KEY'] = SECRET_KEY

    if session is None:
        store = StateStore(state_path) if state_path else None
        session = SessionManager(store=store)
        session.load()
    app.extensions['roulette_session'] = session

    from app.routes import main_bp
    app.register_blueprint(main_bp)

    # Handlers must be registered before init_app so every new server gets them
    from app import socketio_handlers  # noqa: F401

    socketio.init_app(app, cors_allowed_origins="*",
                      async_mode=async_mode or SOCKETIO_ASYNC_MODE)

    return app
