"""
Shared client instances: Redis.

redis.from_url() does not connect until first use, so importing this module is
always safe (even when Redis is not running during tests).
"""
import redis

from teamboard.config import REDIS_URL

redis_client = redis.from_url(REDIS_URL, decode_responses=True)
