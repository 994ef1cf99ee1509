"""
Centralized configuration: all env vars and dashboard constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── Database ──────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Auth / sessions ──────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
SESSION_MAX_AGE = int(os.getenv('SESSION_MAX_AGE', 24 * 60 * 60))

# ── Exchange rate ────────────────────────────────────────────────────────────
LOCAL_CURRENCY = os.getenv('LOCAL_CURRENCY', 'THB')
EXCHANGERATE_API_KEY = os.getenv('EXCHANGERATE_API_KEY')
RATE_CACHE_TTL = int(os.getenv('RATE_CACHE_TTL', 3600))
RATE_FETCH_TIMEOUT = float(os.getenv('RATE_FETCH_TIMEOUT', 5))
DEFAULT_EXCHANGE_RATE = 36.5

# ── Rate provider circuit breakers: name → (failure_threshold, reset_timeout) ─
RATE_PROVIDER_BREAKERS = {
    'exchangerate_api': (3, 300),
    'open_er_api': (3, 300),
    'frankfurter': (3, 300),
}

# ── Daily metric counters (summed per team) ──────────────────────────────────
COUNTER_FIELDS = [
    'planned_inquiries',
    'total_inquiries',
    'wasted_inquiries',
    'net_inquiries',
    'planned_daily_spend',
    'actual_spend',
    'deposits_count',
    'silent_inquiries',
    'repeat_inquiries',
    'existing_user_inquiries',
    'spam_inquiries',
    'blocked_inquiries',
    'under_18_inquiries',
    'over_50_inquiries',
    'foreigner_inquiries',
    'new_player_value_thb',
]
