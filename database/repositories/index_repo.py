"""Recency index repository: bounded newest-first id lists in Redis."""
import json
import logging
from typing import List, Optional
import redis.asyncio as redis

from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

INDEX_PREFIX = "index:"
GLOBAL_INDEX_KEY = "index:all"


def source_index_key(source) -> str:
    return f"{INDEX_PREFIX}{getattr(source, 'value', source)}"


class IndexRepository:
    """Per-source and global lists of article ids, newest first.

    Updates are read-modify-write without locking. Two concurrent writers can
    lose one another's update; the next crawl re-adds the id.
    """

    def __init__(self, redis_client: redis.Redis, settings: Optional[Settings] = None):
        self.redis = redis_client
        self.settings = settings or default_settings

    async def _read(self, key: str) -> List[str]:
        raw = await self.redis.get(key)
        if not raw:
            return []
        try:
            ids = json.loads(raw)
        except json.JSONDecodeError:
            logger.error(f"Corrupt index at {key}, starting over")
            return []
        return [i for i in ids if isinstance(i, str)] if isinstance(ids, list) else []

    async def _write(self, key: str, ids: List[str]):
        await self.redis.set(key, json.dumps(ids), ex=self.settings.index_ttl)

    async def _prepend(self, key: str, article_id: str, cap: int):
        ids = await self._read(key)
        ids = [article_id] + [i for i in ids if i != article_id]
        await self._write(key, ids[:cap])

    async def add(self, article_id: str, source) -> None:
        """Put ``article_id`` at the head of its source index and the global index."""
        await self._prepend(source_index_key(source), article_id, self.settings.max_articles_per_source)
        await self._prepend(GLOBAL_INDEX_KEY, article_id, self.settings.max_articles_global)

    async def get(self, source=None) -> List[str]:
        """Get ids newest first, for one source or across all sources."""
        key = source_index_key(source) if source else GLOBAL_INDEX_KEY
        return await self._read(key)

    async def remove(self, article_id: str, source) -> None:
        """Drop an id from its source index and the global index."""
        for key in (source_index_key(source), GLOBAL_INDEX_KEY):
            ids = await self._read(key)
            if article_id in ids:
                await self._write(key, [i for i in ids if i != article_id])

    async def clear_all(self) -> List[str]:
        """Delete every index key. Returns the keys that were deleted."""
        keys = [key async for key in self.redis.scan_iter(match=f"{INDEX_PREFIX}*")]
        if keys:
            await self.redis.delete(*keys)
        logger.info(f"Cleared {len(keys)} index keys")
        return sorted(keys)
