"""
Daily metric reads from the relational store.

Errors propagate to the caller; the overview routes turn them into a 500.
"""
import logging
from datetime import date
from typing import List

from teamboard.config import COUNTER_FIELDS
from teamboard.database import get_session
from teamboard.models.daily_metric import DailyMetric
from teamboard.services.metrics import RawMetricRow

logger = logging.getLogger('services.metrics_store')

_FLOAT_FIELDS = {'planned_daily_spend', 'actual_spend', 'new_player_value_thb'}


def _to_row(record: DailyMetric) -> RawMetricRow:
    values = {}
    for name in COUNTER_FIELDS:
        raw = getattr(record, name)
        if name in _FLOAT_FIELDS:
            values[name] = float(raw or 0)
        else:
            values[name] = int(raw or 0)
    return RawMetricRow(team_name=record.team_name, record_date=record.record_date, **values)


def load_daily_rows(start_date: date, end_date: date) -> List[RawMetricRow]:
    """All rows with start_date <= record_date <= end_date, oldest first."""
    session = get_session()
    try:
        records = session.query(DailyMetric).filter(
            DailyMetric.record_date.between(start_date, end_date),
        ).order_by(DailyMetric.record_date.asc(), DailyMetric.id.asc()).all()
        rows = [_to_row(rec) for rec in records]
        logger.debug("Loaded %d daily rows for %s..%s", len(rows), start_date, end_date)
        return rows
    except Exception:
        logger.error("Failed to load daily metrics for %s..%s", start_date, end_date, exc_info=True)
        raise
    finally:
        session.close()


def upsert_daily_metric(session, team_name: str, record_date: date, **counters) -> DailyMetric:
    """Insert or update the (team, date) row. Caller commits."""
    record = session.query(DailyMetric).filter_by(
        team_name=team_name,
        record_date=record_date,
    ).first()
    if record is None:
        record = DailyMetric(team_name=team_name, record_date=record_date)
        session.add(record)
    for name, value in counters.items():
        setattr(record, name, value)
    return record
