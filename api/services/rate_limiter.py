"""Fixed-window request rate limiting in Redis."""
import json
import logging
import math
import time
from dataclasses import dataclass
from typing import Optional
import redis.asyncio as redis

from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitRule:
    """Budget for one scope of endpoints."""
    max_requests: int
    window_seconds: int
    key_prefix: str


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # epoch milliseconds
    retry_after: int = 0

    def headers(self) -> dict:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }


def admin_rule(settings: Settings) -> RateLimitRule:
    return RateLimitRule(settings.rate_limit_admin_requests, settings.rate_limit_window, "ratelimit:admin:")


def transform_rule(settings: Settings) -> RateLimitRule:
    return RateLimitRule(settings.rate_limit_transform_requests, settings.rate_limit_window, "ratelimit:transform:")


class RateLimiter:
    """Counts requests per client in a fixed window.

    The window record is ``{"count", "resetAt"}`` stored with a TTL slightly
    longer than the window. Errors talking to Redis let the request through.
    """

    def __init__(self, redis_client: redis.Redis, settings: Optional[Settings] = None):
        self.redis = redis_client
        self.settings = settings or default_settings

    async def hit(self, rule: RateLimitRule, client_id: str, now_ms: Optional[int] = None) -> RateLimitDecision:
        """Record a request and decide whether it may proceed."""
        now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
        window_ms = rule.window_seconds * 1000
        key = f"{rule.key_prefix}{client_id}"

        try:
            raw = await self.redis.get(key)
            data = json.loads(raw) if raw else None
            if not data or now_ms > int(data.get("resetAt", 0)):
                data = {"count": 0, "resetAt": now_ms + window_ms}

            if data["count"] >= rule.max_requests:
                retry_after = max(0, math.ceil((data["resetAt"] - now_ms) / 1000))
                logger.warning(f"Rate limit exceeded for {key}")
                return RateLimitDecision(False, rule.max_requests, 0, data["resetAt"], retry_after)

            data["count"] += 1
            await self.redis.set(key, json.dumps(data), ex=rule.window_seconds + 10)
            return RateLimitDecision(
                True, rule.max_requests, rule.max_requests - data["count"], data["resetAt"]
            )
        except Exception as e:
            logger.error(f"Rate limiter error, allowing request: {e}")
            return RateLimitDecision(True, rule.max_requests, rule.max_requests, now_ms + window_ms)
