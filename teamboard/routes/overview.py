"""
Overview API: per-team summaries, chart series and the current exchange rate.
"""
import logging
from datetime import date, datetime
from flask import Blueprint, current_app, jsonify, request

from teamboard.config import LOCAL_CURRENCY
from teamboard.services.metrics import SERIES_NAMES, aggregate, pivot_series
from teamboard.services.metrics_store import load_daily_rows

logger = logging.getLogger('routes.overview')

bp = Blueprint('overview', __name__)


class DateRangeError(ValueError):
    pass


def _parse_date(value):
    parsed = datetime.strptime(value, '%Y-%m-%d').date()
    # strptime also takes unpadded fields like 2025-8-1
    if parsed.isoformat() != value:
        raise ValueError(f'not a zero-padded date: {value}')
    return parsed


def _parse_range(args):
    """startDate/endDate (YYYY-MM-DD, inclusive); either one defaults to today."""
    today = date.today()
    try:
        start = _parse_date(args['startDate']) if args.get('startDate') else today
        end = _parse_date(args['endDate']) if args.get('endDate') else today
    except ValueError:
        raise DateRangeError('Dates must be YYYY-MM-DD')
    if start > end:
        raise DateRangeError('startDate must not be after endDate')
    return start, end


def _team_summaries(start, end):
    rows = load_daily_rows(start, end)
    rate = current_app.extensions['rate_resolver'].resolve()
    return aggregate(rows, rate)


@bp.route('/api/overview')
def overview():
    """JSON array of TeamSummary for the requested date range."""
    try:
        start, end = _parse_range(request.args)
    except DateRangeError as e:
        return jsonify({'message': str(e)}), 400

    try:
        summaries = _team_summaries(start, end)
    except Exception as e:
        logger.error("Error building overview for %s..%s: %s", start, end, e, exc_info=True)
        return jsonify({'message': 'Internal Server Error', 'error': str(e)}), 500

    return jsonify([team.to_dict() for team in summaries])


@bp.route('/api/overview/chart')
def overview_chart():
    """One daily series pivoted to [{date, <team>: value, ...}] for line charts."""
    metric = request.args.get('metric', 'cost_per_inquiry_daily')
    if metric not in SERIES_NAMES:
        return jsonify({'message': f'Unknown metric: {metric}', 'allowed': SERIES_NAMES}), 400

    try:
        start, end = _parse_range(request.args)
    except DateRangeError as e:
        return jsonify({'message': str(e)}), 400

    try:
        summaries = _team_summaries(start, end)
    except Exception as e:
        logger.error("Error building %s chart for %s..%s: %s", metric, start, end, e, exc_info=True)
        return jsonify({'message': 'Internal Server Error', 'error': str(e)}), 500

    return jsonify({
        'metric': metric,
        'teams': [team.team_name for team in summaries],
        'data': pivot_series(summaries, metric),
    })


@bp.route('/api/exchange-rate')
def exchange_rate():
    rate = current_app.extensions['rate_resolver'].resolve()
    return jsonify({**rate.to_dict(), 'currency': LOCAL_CURRENCY})
