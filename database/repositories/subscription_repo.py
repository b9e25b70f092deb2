"""Subscription repository for push subscriptions in Redis."""
import json
import logging
from typing import List, Optional, Tuple
import redis.asyncio as redis
from pydantic import ValidationError as PydanticValidationError

from api.models.subscription import PushSubscription
from shared.utils import endpoint_hash

logger = logging.getLogger(__name__)

SUBSCRIPTION_PREFIX = "sub:"


def subscription_key(endpoint: str) -> str:
    return f"{SUBSCRIPTION_PREFIX}{endpoint_hash(endpoint)}"


class SubscriptionRepository:
    """Repository for push subscriptions, one key per endpoint, no expiry."""

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client

    async def save(self, subscription: PushSubscription) -> str:
        """Store a subscription, replacing any earlier one for the same endpoint."""
        key = subscription_key(subscription.endpoint)
        await self.redis.set(key, subscription.model_dump_json(by_alias=True, exclude_none=True))
        return key

    async def get_keys(self) -> List[str]:
        return [key async for key in self.redis.scan_iter(match=f"{SUBSCRIPTION_PREFIX}*")]

    async def find_by_key(self, key: str) -> Optional[PushSubscription]:
        raw = await self.redis.get(key)
        if not raw:
            return None
        try:
            return PushSubscription.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error(f"Invalid subscription stored at {key}: {e}")
            return None

    async def find_all(self) -> List[Tuple[str, PushSubscription]]:
        """Get all readable subscriptions as ``(key, subscription)`` pairs."""
        result = []
        for key in await self.get_keys():
            subscription = await self.find_by_key(key)
            if subscription is not None:
                result.append((key, subscription))
        return result

    async def delete(self, key: str) -> bool:
        return await self.redis.delete(key) > 0

    async def count(self) -> int:
        return len(await self.get_keys())
