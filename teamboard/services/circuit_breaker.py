"""
Redis-backed circuit breakers for the exchange-rate providers.

Every gunicorn worker shares the same breaker state through Redis, so a provider
that keeps timing out is skipped by all workers until its reset window passes:
  - CLOSED    → calls go through
  - OPEN      → calls short-circuit with CircuitOpenError
  - HALF_OPEN → reset_timeout elapsed, the next call is a trial

If Redis itself is unreachable the breaker fails open (reports CLOSED).
"""
import logging
import time

logger = logging.getLogger('services.circuit_breaker')

CLOSED = 'closed'
OPEN = 'open'
HALF_OPEN = 'half_open'


class CircuitOpenError(Exception):
    """Raised when a provider is called through an open breaker."""
    def __init__(self, name, retry_after=None):
        self.name = name
        self.retry_after = retry_after
        super().__init__(f"Rate provider '{name}' circuit is OPEN")


class CircuitBreaker:
    """
    One breaker per rate provider.

    Keys:
        ratecb:{name}:state         → closed | open | half_open
        ratecb:{name}:failures      → consecutive failure count
        ratecb:{name}:opened_at     → epoch seconds of the last failure
        ratecb:{name}:health        → hash of success/failure counters
    """

    PREFIX = 'ratecb'

    def __init__(self, name, redis_client, failure_threshold=3, reset_timeout=300, clock=time.time):
        self.name = name
        self.redis = redis_client
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock

    def _key(self, suffix):
        return f'{self.PREFIX}:{self.name}:{suffix}'

    # ── State ─────────────────────────────────────────────────────────

    @property
    def state(self):
        try:
            current = self.redis.get(self._key('state')) or CLOSED
            if current == OPEN and self._seconds_since_failure() > self.reset_timeout:
                self.redis.set(self._key('state'), HALF_OPEN)
                return HALF_OPEN
            return current
        except Exception:
            logger.warning("Redis unavailable for breaker '%s', failing open", self.name)
            return CLOSED

    @property
    def failure_count(self):
        try:
            return int(self.redis.get(self._key('failures')) or 0)
        except Exception:
            return 0

    def _seconds_since_failure(self):
        last = self.redis.get(self._key('opened_at'))
        if not last:
            return float('inf')
        return self._clock() - float(last)

    # ── Calls ─────────────────────────────────────────────────────────

    def call(self, func, *args, **kwargs):
        """Run func through the breaker; re-raises whatever func raises."""
        if self.state == OPEN:
            try:
                retry_after = max(0.0, self.reset_timeout - self._seconds_since_failure())
            except Exception:
                retry_after = None
            raise CircuitOpenError(self.name, retry_after=retry_after)

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._on_failure(e)
            raise
        self._on_success()
        return result

    def _on_success(self):
        try:
            pipe = self.redis.pipeline()
            pipe.set(self._key('state'), CLOSED)
            pipe.set(self._key('failures'), 0)
            pipe.hincrby(self._key('health'), 'success', 1)
            pipe.hset(self._key('health'), 'last_success', str(self._clock()))
            pipe.execute()
        except Exception:
            logger.warning("Could not record success for breaker '%s'", self.name)

    def _on_failure(self, error):
        try:
            failures = self.redis.incr(self._key('failures'))
            now = str(self._clock())
            pipe = self.redis.pipeline()
            pipe.set(self._key('opened_at'), now)
            pipe.hincrby(self._key('health'), 'failure', 1)
            pipe.hset(self._key('health'), 'last_failure', now)
            pipe.hset(self._key('health'), 'last_error', str(error)[:200])
            if failures >= self.failure_threshold:
                pipe.set(self._key('state'), OPEN)
            pipe.execute()
        except Exception:
            logger.warning("Could not record failure for breaker '%s'", self.name)
            return

        if failures >= self.failure_threshold:
            logger.warning(
                "Rate provider '%s' circuit OPENED after %d failures: %s",
                self.name, failures, error,
            )
        else:
            logger.info(
                "Rate provider '%s' failure %d/%d: %s",
                self.name, failures, self.failure_threshold, error,
            )

    def reset(self):
        """Force the breaker back to CLOSED."""
        pipe = self.redis.pipeline()
        pipe.set(self._key('state'), CLOSED)
        pipe.set(self._key('failures'), 0)
        pipe.delete(self._key('opened_at'))
        pipe.execute()
        logger.info("Rate provider '%s' circuit manually reset", self.name)

    def get_health(self):
        """Health snapshot for /api/health."""
        try:
            data = self.redis.hgetall(self._key('health')) or {}
        except Exception:
            return {
                'name': self.name,
                'state': 'unknown',
                'failure_count': 0,
                'failure_threshold': self.failure_threshold,
                'reset_timeout': self.reset_timeout,
                'total_success': 0,
                'total_failure': 0,
                'last_error': '',
            }
        return {
            'name': self.name,
            'state': self.state,
            'failure_count': self.failure_count,
            'failure_threshold': self.failure_threshold,
            'reset_timeout': self.reset_timeout,
            'total_success': int(data.get('success', 0)),
            'total_failure': int(data.get('failure', 0)),
            'last_error': data.get('last_error', ''),
        }


def init_breakers(redis_client, settings):
    """Build breakers from a {name: (failure_threshold, reset_timeout)} map."""
    return {
        name: CircuitBreaker(name, redis_client, failure_threshold=threshold, reset_timeout=timeout)
        for name, (threshold, timeout) in settings.items()
    }
