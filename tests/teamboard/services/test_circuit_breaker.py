"""Tests for teamboard.services.circuit_breaker: per-provider breakers in Redis."""
import pytest
from unittest.mock import MagicMock

from teamboard.services.circuit_breaker import (
    CircuitBreaker, CircuitOpenError, CLOSED, OPEN, HALF_OPEN, init_breakers,
)

T0 = 1_700_000_000.0


class Clock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def cb(fake_redis, clock):
    return CircuitBreaker('open_er_api', fake_redis, failure_threshold=3, reset_timeout=10, clock=clock)


def _fail():
    raise ValueError('bad body')


def _trip(cb):
    for _ in range(cb.failure_threshold):
        with pytest.raises(ValueError):
            cb.call(_fail)


class TestStates:

    def test_starts_closed(self, cb):
        assert cb.state == CLOSED

    def test_success_keeps_closed(self, cb):
        assert cb.call(lambda: 35.0) == 35.0
        assert cb.state == CLOSED

    def test_counts_failures_below_threshold(self, cb):
        for _ in range(2):
            with pytest.raises(ValueError):
                cb.call(_fail)
        assert cb.failure_count == 2
        assert cb.state == CLOSED

    def test_opens_at_threshold(self, cb):
        _trip(cb)
        assert cb.state == OPEN

    def test_open_rejects_without_calling(self, cb):
        _trip(cb)
        func = MagicMock()
        with pytest.raises(CircuitOpenError) as exc_info:
            cb.call(func)
        func.assert_not_called()
        assert exc_info.value.name == 'open_er_api'
        assert exc_info.value.retry_after == 10

    def test_half_open_after_reset_timeout(self, cb, clock):
        _trip(cb)
        clock.now += 11
        assert cb.state == HALF_OPEN

    def test_half_open_success_closes(self, cb, clock):
        _trip(cb)
        clock.now += 11
        cb.call(lambda: 35.0)
        assert cb.state == CLOSED
        assert cb.failure_count == 0

    def test_success_resets_failure_count(self, cb):
        with pytest.raises(ValueError):
            cb.call(_fail)
        cb.call(lambda: 35.0)
        assert cb.failure_count == 0


class TestHealthAndReset:

    def test_health_counters(self, cb):
        cb.call(lambda: 1)
        with pytest.raises(ValueError):
            cb.call(_fail)
        health = cb.get_health()
        assert health['name'] == 'open_er_api'
        assert health['total_success'] == 1
        assert health['total_failure'] == 1
        assert health['last_error'] == 'bad body'
        assert health['failure_threshold'] == 3

    def test_reset_closes_open_breaker(self, cb):
        _trip(cb)
        cb.reset()
        assert cb.state == CLOSED
        assert cb.failure_count == 0


class TestRedisDown:

    @pytest.fixture
    def broken_redis(self):
        mock = MagicMock()
        mock.get.side_effect = ConnectionError('redis down')
        mock.incr.side_effect = ConnectionError('redis down')
        mock.pipeline.side_effect = ConnectionError('redis down')
        mock.hgetall.side_effect = ConnectionError('redis down')
        return mock

    def test_fails_open(self, broken_redis):
        cb = CircuitBreaker('frankfurter', broken_redis)
        assert cb.state == CLOSED
        assert cb.call(lambda: 35.0) == 35.0

    def test_failure_still_propagates(self, broken_redis):
        cb = CircuitBreaker('frankfurter', broken_redis)
        with pytest.raises(ValueError):
            cb.call(_fail)

    def test_health_unknown(self, broken_redis):
        cb = CircuitBreaker('frankfurter', broken_redis)
        assert cb.get_health()['state'] == 'unknown'


class TestInitBreakers:

    def test_builds_from_settings(self, fake_redis):
        breakers = init_breakers(fake_redis, {'a': (2, 60), 'b': (5, 120)})
        assert set(breakers) == {'a', 'b'}
        assert breakers['a'].failure_threshold == 2
        assert breakers['b'].reset_timeout == 120
