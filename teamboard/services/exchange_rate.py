"""
USD → local-currency exchange rate with a TTL cache and provider fallback.

Providers are tried in priority order; the first one whose JSON yields a
positive finite number wins and is cached for RATE_CACHE_TTL seconds. When every
provider fails, DEFAULT_EXCHANGE_RATE is returned and the cache is left alone
so the next call tries the providers again.
"""
import json
import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import requests

from teamboard.config import (
    DEFAULT_EXCHANGE_RATE, EXCHANGERATE_API_KEY, LOCAL_CURRENCY,
    RATE_CACHE_TTL, RATE_FETCH_TIMEOUT,
)
from teamboard.services.circuit_breaker import CircuitOpenError

logger = logging.getLogger('services.exchange_rate')


@dataclass(frozen=True)
class ConversionRate:
    rate: float          # local-currency units per 1 USD
    fetched_at: float    # epoch seconds

    def to_dict(self):
        return {
            'rate': self.rate,
            'fetched_at': datetime.fromtimestamp(self.fetched_at, tz=timezone.utc).isoformat(),
        }


@dataclass(frozen=True)
class RateProvider:
    name: str
    url: str
    extract: Callable[[dict], Optional[float]]


def _positive(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return float(value)


def _conversion_rates_extractor(currency):
    """exchangerate-api.com v6: {"result": "success", "conversion_rates": {...}}"""
    def extract(data):
        if data.get('result') != 'success':
            return None
        return _positive((data.get('conversion_rates') or {}).get(currency))
    return extract


def _open_er_extractor(currency):
    """open.er-api.com: {"result": "success", "rates": {...}}"""
    def extract(data):
        if data.get('result') != 'success':
            return None
        return _positive((data.get('rates') or {}).get(currency))
    return extract


def _frankfurter_extractor(currency):
    """frankfurter.app: {"base": "USD", "rates": {...}}"""
    def extract(data):
        return _positive((data.get('rates') or {}).get(currency))
    return extract


def default_providers(currency=LOCAL_CURRENCY, api_key=EXCHANGERATE_API_KEY) -> List[RateProvider]:
    """Provider chain in priority order. The keyed API is skipped without a key."""
    providers = []
    if api_key:
        providers.append(RateProvider(
            'exchangerate_api',
            f'https://v6.exchangerate-api.com/v6/{api_key}/latest/USD',
            _conversion_rates_extractor(currency),
        ))
    providers.append(RateProvider(
        'open_er_api',
        'https://open.er-api.com/v6/latest/USD',
        _open_er_extractor(currency),
    ))
    providers.append(RateProvider(
        'frankfurter',
        f'https://api.frankfurter.app/latest?from=USD&to={currency}',
        _frankfurter_extractor(currency),
    ))
    return providers


class RateResolver:
    """
    Owns the cached rate. One instance lives on the Flask app
    (app.extensions['rate_resolver']).

    Usage:
        resolver = RateResolver(default_providers())
        rate = resolver.resolve()
    """

    def __init__(
        self,
        providers: List[RateProvider],
        ttl: float = RATE_CACHE_TTL,
        timeout: float = RATE_FETCH_TIMEOUT,
        default_rate: float = DEFAULT_EXCHANGE_RATE,
        breakers: Optional[Dict] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.providers = list(providers)
        self.ttl = ttl
        self.timeout = timeout
        self.default_rate = default_rate
        self.breakers = breakers or {}
        self._clock = clock
        self.cached: Optional[ConversionRate] = None

    def is_fresh(self, now: float) -> bool:
        return self.cached is not None and now - self.cached.fetched_at < self.ttl

    def resolve(self, now: Optional[float] = None) -> ConversionRate:
        """Return the cached rate, a freshly fetched one, or the default."""
        if now is None:
            now = self._clock()
        if self.is_fresh(now):
            return self.cached

        for provider in self.providers:
            rate = self._try_provider(provider)
            if rate is not None:
                self.cached = ConversionRate(rate=rate, fetched_at=now)
                logger.info("Exchange rate %.4f from %s", rate, provider.name)
                return self.cached

        logger.warning(
            "All %d rate providers failed, using default %.2f",
            len(self.providers), self.default_rate,
        )
        return ConversionRate(rate=self.default_rate, fetched_at=now)

    def _try_provider(self, provider: RateProvider) -> Optional[float]:
        breaker = self.breakers.get(provider.name)
        try:
            if breaker is not None:
                return breaker.call(self._fetch, provider)
            return self._fetch(provider)
        except CircuitOpenError as e:
            logger.info("Skipping %s: %s", provider.name, e)
        except requests.exceptions.RequestException as e:
            logger.error("Rate provider %s request failed: %s", provider.name, e)
        except Exception as e:
            logger.error("Rate provider %s returned an unusable body: %s", provider.name, e)
        return None

    def _fetch(self, provider: RateProvider) -> float:
        # requests' timeout bounds each socket wait, not the whole body
        deadline = time.monotonic() + self.timeout
        with requests.get(provider.url, timeout=self.timeout, stream=True) as response:
            response.raise_for_status()
            body = bytearray()
            for chunk in response.iter_content(chunk_size=4096):
                body.extend(chunk)
                if time.monotonic() > deadline:
                    raise requests.exceptions.Timeout(
                        f"{provider.name} body not received within {self.timeout}s")
        rate = _positive(provider.extract(json.loads(body)))
        if rate is None:
            raise ValueError(f"no positive {provider.name} rate in response")
        return rate
