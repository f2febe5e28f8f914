"""
SocketIO Event Handlers - real-time spin input for the dashboard.

Every accepted change is answered with the refreshed state and, once
enough spins exist, a fresh prediction.  Bad input never raises: the
client gets an advisory `spin_rejected` event and can keep going.
"""

from flask import current_app
from flask_socketio import emit

from app import socketio


def _session():
    return current_app.extensions['roulette_session']


def _emit_prediction(session):
    emit('prediction_result', session.get_predictions())


def _parse_int(value):
    """Whole numbers and numeric strings only; JSON true/false and 36.9 are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@socketio.on('connect')
def handle_connect():
    session = _session()
    emit('connected', {
        'message': 'Connected to Roulette Consensus Predictor',
        'state': session.get_state(),
    })


@socketio.on('add_spin')
def handle_add_spin(data):
    session = _session()
    raw = data.get('number') if isinstance(data, dict) else data
    number = _parse_int(raw)

    if number is None or not session.add_spin(number):
        emit('spin_rejected', {'value': raw, 'message': 'Enter a number from 0 to 36'})
        return

    emit('spin_processed', {'number': number, 'state': session.get_state()})
    _emit_prediction(session)


@socketio.on('undo_spin')
def handle_undo_spin():
    session = _session()
    removed = session.undo_last()
    emit('spin_undone', {'removed': removed, 'state': session.get_state()})
    _emit_prediction(session)


@socketio.on('remove_spin')
def handle_remove_spin(data):
    session = _session()
    index = _parse_int(data.get('index') if isinstance(data, dict) else data)
    removed = session.remove_at(index) if index is not None else None
    emit('spin_removed', {'index': index, 'removed': removed, 'state': session.get_state()})
    _emit_prediction(session)


@socketio.on('reset_session')
def handle_reset_session():
    session = _session()
    session.reset()
    emit('session_reset', {'state': session.get_state()})


@socketio.on('import_spins')
def handle_import_spins(data):
    session = _session()
    raw = data.get('numbers', []) if isinstance(data, dict) else (data or [])
    if isinstance(raw, str):
        raw = [part for part in raw.replace('\n', ',').split(',') if part.strip()]
    numbers = [_parse_int(v) for v in raw]
    imported = session.load_history([n for n in numbers if n is not None])
    emit('import_complete', {
        'imported': imported,
        'rejected': len(numbers) - imported,
        'state': session.get_state(),
    })
    _emit_prediction(session)


@socketio.on('get_predictions')
def handle_get_predictions():
    _emit_prediction(_session())
