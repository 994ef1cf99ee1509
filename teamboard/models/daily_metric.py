"""
DailyMetric model: one calendar day of activity for one team.
"""
from sqlalchemy import Column, Integer, Text, Numeric, Date, DateTime, UniqueConstraint, Index
from sqlalchemy.sql import func

from teamboard.database import Base


class DailyMetric(Base):
    __tablename__ = 'daily_metrics'
    __table_args__ = (
        UniqueConstraint('team_name', 'record_date', name='uq_daily_metric_team_date'),
        Index('ix_daily_metrics_record_date', 'record_date'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_name = Column(Text, nullable=False)
    record_date = Column(Date, nullable=False)
    planned_inquiries = Column(Integer, default=0)
    total_inquiries = Column(Integer, default=0)
    wasted_inquiries = Column(Integer, default=0)
    net_inquiries = Column(Integer, default=0)
    planned_daily_spend = Column(Numeric(12, 2), default=0)
    actual_spend = Column(Numeric(12, 2), default=0)
    deposits_count = Column(Integer, default=0)
    silent_inquiries = Column(Integer, default=0)
    repeat_inquiries = Column(Integer, default=0)
    existing_user_inquiries = Column(Integer, default=0)
    spam_inquiries = Column(Integer, default=0)
    blocked_inquiries = Column(Integer, default=0)
    under_18_inquiries = Column(Integer, default=0)
    over_50_inquiries = Column(Integer, default=0)
    foreigner_inquiries = Column(Integer, default=0)
    new_player_value_thb = Column(Numeric(14, 2), default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
