"""
Flask application factory.

Creates and configures the app, wires the exchange-rate resolver and
registers all blueprints.
"""
import os
from datetime import timedelta
from flask import Flask, request, session, redirect, jsonify


OPEN_PATHS = {'/health', '/login'}


def create_app(rate_resolver=None):
    """Create and configure the Flask application."""
    from teamboard.config import SECRET_KEY, SESSION_MAX_AGE, RATE_PROVIDER_BREAKERS
    from teamboard.logging_config import configure_logging

    app = Flask(
        __name__,
        template_folder=os.path.join(os.path.dirname(os.path.dirname(__file__)), 'templates'),
    )

    configure_logging(app)

    app.secret_key = SECRET_KEY
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(seconds=SESSION_MAX_AGE)

    # ── Exchange rate resolver (one per process, shared by all requests) ──
    from teamboard.extensions import redis_client
    from teamboard.services.circuit_breaker import init_breakers
    from teamboard.services.exchange_rate import RateResolver, default_providers

    breakers = init_breakers(redis_client, RATE_PROVIDER_BREAKERS)
    if rate_resolver is None:
        rate_resolver = RateResolver(default_providers(), breakers=breakers)
    app.extensions['rate_breakers'] = breakers
    app.extensions['rate_resolver'] = rate_resolver

    # ── Session liveness ─────────────────────────────────────────────────
    from teamboard.services.auth import validate_session

    @app.before_request
    def require_live_session():
        if request.path in OPEN_PATHS or request.path.startswith('/static/'):
            return
        if request.path == '/api/auth/session':
            return
        if validate_session(session.get('user_id'), session.get('session_token')):
            return
        session.clear()
        if request.path.startswith('/api/'):
            return jsonify({'message': 'Unauthorized'}), 401
        return redirect('/login')

    from teamboard.routes.auth import bp as auth_bp
    from teamboard.routes.dashboard import bp as dashboard_bp
    from teamboard.routes.overview import bp as overview_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(overview_bp)

    return app
