"""
ActivityLog model: audit trail of user actions (login, ...).
"""
from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func

from teamboard.database import Base


class ActivityLog(Base):
    __tablename__ = 'activity_logs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    action = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
