"""
Dashboard routes: overview page, health checks, rate-provider breaker admin.
"""
import logging
from flask import Blueprint, current_app, jsonify, render_template, session

logger = logging.getLogger('routes.dashboard')

bp = Blueprint('dashboard', __name__)


@bp.route('/')
def index():
    """Overview page; the table and charts load from /api/overview."""
    return render_template('overview.html', user_name=session.get('user_name'))


@bp.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy"}), 200


@bp.route('/api/health')
def api_health():
    """Circuit breaker state for every exchange-rate provider."""
    breakers = current_app.extensions['rate_breakers']
    return jsonify({'services': {name: cb.get_health() for name, cb in breakers.items()}})


@bp.route('/api/health/<provider>/reset', methods=['POST'])
def reset_provider(provider):
    breakers = current_app.extensions['rate_breakers']
    breaker = breakers.get(provider)
    if breaker is None:
        return jsonify({'ok': False, 'error': f'Unknown provider: {provider}'}), 404
    try:
        breaker.reset()
    except Exception as e:
        logger.error("Error resetting breaker %s: %s", provider, e)
        return jsonify({'ok': False, 'error': str(e)}), 500
    return jsonify({'ok': True, 'state': breaker.state})
