"""
Staff authentication + single-active-session enforcement.

Each successful login rotates users.session_token. The Flask session carries the
token it was issued; a request whose token no longer matches the stored one
belongs to a session that was superseded by a newer login and is rejected.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import bcrypt

from teamboard.database import get_session
from teamboard.models.activity_log import ActivityLog
from teamboard.models.user import User

logger = logging.getLogger('services.auth')


@dataclass
class AuthenticatedUser:
    id: str
    name: str
    session_token: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Malformed password hash encountered")
        return False


def new_session_token() -> str:
    return secrets.token_hex(32)


def authenticate(username: str, password: str) -> Optional[AuthenticatedUser]:
    """
    Verify credentials; on success rotate the session token, mark the user
    online and record a 'login' activity row.
    """
    if not username or not password:
        return None

    session = get_session()
    try:
        user = session.query(User).filter_by(username=username).first()
        if user is None or not check_password(password, user.password):
            logger.info("Failed login for %s", username)
            return None

        token = new_session_token()
        user.session_token = token
        user.last_seen = datetime.now(timezone.utc)
        user.is_online = True
        session.add(ActivityLog(user_id=str(user.id), action='login'))
        session.commit()

        logger.info("User %s logged in", user.username)
        return AuthenticatedUser(id=str(user.id), name=user.username, session_token=token)
    except Exception:
        session.rollback()
        logger.error("Login failed for %s", username, exc_info=True)
        raise
    finally:
        session.close()


def validate_session(user_id, session_token) -> bool:
    """
    True when session_token is still the user's live token. Touches last_seen.

    A database error counts as an invalid session.
    """
    if not user_id or not session_token:
        return False

    session = get_session()
    try:
        user = session.get(User, int(user_id))
        if user is None or user.session_token != session_token:
            return False
        user.last_seen = datetime.now(timezone.utc)
        session.commit()
        return True
    except Exception:
        session.rollback()
        logger.error("Session check failed for user %s", user_id, exc_info=True)
        return False
    finally:
        session.close()


def sign_out(user_id) -> None:
    """Mark the user offline. The token stays until the next login rotates it."""
    if not user_id:
        return

    session = get_session()
    try:
        user = session.get(User, int(user_id))
        if user is not None:
            user.is_online = False
            session.commit()
    except Exception:
        session.rollback()
        logger.error("Failed to mark user %s offline", user_id, exc_info=True)
    finally:
        session.close()


def create_user(session, username: str, password: str) -> User:
    """Add a staff user with a bcrypt-hashed password. Caller commits."""
    user = User(username=username, password=hash_password(password), is_online=False)
    session.add(user)
    return user
