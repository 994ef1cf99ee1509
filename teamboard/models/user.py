"""
User model: staff accounts for the dashboard.

session_token holds the token of the single live session; logging in again
rotates it, which invalidates every other session for that user.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime
from sqlalchemy.sql import func

from teamboard.database import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    session_token = Column(Text, nullable=True)
    last_seen = Column(DateTime(timezone=True), nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
