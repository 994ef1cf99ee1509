"""Shared test fixtures."""
from datetime import date

import bcrypt
import pytest
from unittest.mock import patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from teamboard.database import Base
from teamboard.services.exchange_rate import ConversionRate
from teamboard.services.metrics import RawMetricRow


class FakeRedis:
    """Minimal in-memory Redis fake (strings, hashes, pipelines)."""

    def __init__(self):
        self.get_store = {}
        self.hash_store = {}

    def get(self, key):
        return self.get_store.get(key)

    def set(self, key, value):
        self.get_store[key] = str(value)

    def incr(self, key):
        val = int(self.get_store.get(key, 0)) + 1
        self.get_store[key] = str(val)
        return val

    def delete(self, *keys):
        for k in keys:
            self.get_store.pop(k, None)
            self.hash_store.pop(k, None)

    def hset(self, key, field, value):
        self.hash_store.setdefault(key, {})[field] = str(value)

    def hincrby(self, key, field, amount):
        h = self.hash_store.setdefault(key, {})
        h[field] = str(int(h.get(field, 0)) + amount)

    def hgetall(self, key):
        return dict(self.hash_store.get(key, {}))

    def pipeline(self):
        return FakePipeline(self)


class FakePipeline:
    """Queues commands and applies them on execute()."""

    def __init__(self, redis):
        self._redis = redis
        self._ops = []

    def __getattr__(self, name):
        def queue(*args):
            self._ops.append((name, args))
            return self
        return queue

    def execute(self):
        for name, args in self._ops:
            getattr(self._redis, name)(*args)
        self._ops = []


class FakeResolver:
    """Stands in for RateResolver on the Flask app."""

    def __init__(self, rate=35.0):
        self.rate = rate
        self.calls = 0

    def resolve(self, now=None):
        self.calls += 1
        return ConversionRate(rate=self.rate, fetched_at=1_700_000_000.0)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine('sqlite:///:memory:')
    import teamboard.models.activity_log
    import teamboard.models.daily_metric
    import teamboard.models.user
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route every service's get_session() to the test session.

    Services do `from teamboard.database import get_session`, so each
    module-level binding is patched. close() is disabled so that services
    closing their session in `finally` don't invalidate the shared one.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('teamboard.database.get_session', return_value=db_session), \
            patch('teamboard.services.auth.get_session', return_value=db_session), \
            patch('teamboard.services.metrics_store.get_session', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def rate_resolver():
    return FakeResolver(rate=35.0)


@pytest.fixture
def app(fake_redis, rate_resolver):
    """Flask test app with a fixed exchange rate and in-memory Redis."""
    from teamboard import create_app
    with patch('teamboard.extensions.redis_client', fake_redis):
        app = create_app(rate_resolver=rate_resolver)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client (not logged in)."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def make_user(db_session):
    """Factory fixture: inserts a staff user with a cheap bcrypt hash."""
    from teamboard.models.user import User

    def _make(username='staff', password='secret', session_token=None):
        user = User(
            username=username,
            password=bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=4)).decode(),
            session_token=session_token,
            is_online=False,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def auth_client(client, make_user):
    """Test client whose Flask session carries the user's live token."""
    user = make_user(session_token='live-token')
    with client.session_transaction() as sess:
        sess['user_id'] = str(user.id)
        sess['user_name'] = user.username
        sess['session_token'] = 'live-token'
    client.user = user
    return client


@pytest.fixture
def make_row():
    """Factory fixture: builds a RawMetricRow with zeroed counters."""
    def _make(team_name='A', record_date=date(2025, 8, 1), **counters):
        return RawMetricRow(team_name=team_name, record_date=record_date, **counters)
    return _make
