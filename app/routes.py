"""
HTTP Routes - JSON views of the session and CSV export.
"""

from datetime import datetime

from flask import Blueprint, Response, current_app, jsonify

main_bp = Blueprint('main', __name__)


def _session():
    return current_app.extensions['roulette_session']


@main_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'service': 'Roulette Consensus Predictor'})


@main_bp.route('/api/state')
def state():
    return jsonify(_session().get_state())


@main_bp.route('/api/predictions')
def predictions():
    return jsonify(_session().get_predictions())


@main_bp.route('/api/strategies')
def strategies():
    return jsonify(_session().get_strategy_report())


@main_bp.route('/api/agent')
def agent():
    return jsonify(_session().get_agent_status())


@main_bp.route('/api/summary')
def summary():
    return jsonify(_session().get_summary())


@main_bp.route('/api/export.csv')
def export_csv():
    filename = f"roulette_history_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return Response(
        _session().export_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )
