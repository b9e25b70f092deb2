"""Tests for the recency index and subscription repositories."""
import pytest

from api.models.subscription import PushSubscription
from database.repositories.index_repo import GLOBAL_INDEX_KEY, IndexRepository


class TestIndexRepository:
    """Tests for IndexRepository."""

    @pytest.mark.asyncio
    async def test_newest_first(self, index_repo):
        for i in range(3):
            await index_repo.add(f"hn-{i}", "hackernews")

        assert await index_repo.get("hackernews") == ["hn-2", "hn-1", "hn-0"]
        assert await index_repo.get() == ["hn-2", "hn-1", "hn-0"]

    @pytest.mark.asyncio
    async def test_readd_moves_to_head_without_duplicates(self, index_repo):
        await index_repo.add("hn-1", "hackernews")
        await index_repo.add("bbc-1", "bbc")
        await index_repo.add("hn-1", "hackernews")

        assert await index_repo.get() == ["hn-1", "bbc-1"]
        assert await index_repo.get("bbc") == ["bbc-1"]

    @pytest.mark.asyncio
    async def test_caps(self, redis_client, settings):
        repo = IndexRepository(
            redis_client,
            settings.model_copy(update={"max_articles_per_source": 3, "max_articles_global": 4})
        )
        for i in range(5):
            await repo.add(f"hn-{i}", "hackernews")
        await repo.add("bbc-0", "bbc")

        assert await repo.get("hackernews") == ["hn-4", "hn-3", "hn-2"]
        assert await repo.get() == ["bbc-0", "hn-4", "hn-3", "hn-2"]

    @pytest.mark.asyncio
    async def test_ttl_is_set(self, index_repo, redis_client, settings):
        await index_repo.add("hn-1", "hackernews")

        ttl = await redis_client.ttl(GLOBAL_INDEX_KEY)
        assert 0 < ttl <= settings.index_ttl

    @pytest.mark.asyncio
    async def test_remove(self, index_repo):
        await index_repo.add("hn-1", "hackernews")
        await index_repo.add("hn-2", "hackernews")

        await index_repo.remove("hn-1", "hackernews")

        assert await index_repo.get("hackernews") == ["hn-2"]
        assert await index_repo.get() == ["hn-2"]

    @pytest.mark.asyncio
    async def test_corrupt_index_reads_empty(self, index_repo, redis_client):
        await redis_client.set(GLOBAL_INDEX_KEY, "{broken")
        assert await index_repo.get() == []

    @pytest.mark.asyncio
    async def test_clear_all(self, index_repo, redis_client):
        await index_repo.add("hn-1", "hackernews")
        await index_repo.add("t24-1", "t24")
        await redis_client.set("sub:abc", "{}")

        deleted = await index_repo.clear_all()

        assert deleted == ["index:all", "index:hackernews", "index:t24"]
        assert await index_repo.get() == []
        assert await redis_client.get("sub:abc") == "{}"


class TestSubscriptionRepository:
    """Tests for SubscriptionRepository."""

    @pytest.mark.asyncio
    async def test_save_is_idempotent_per_endpoint(self, subscription_repo, sample_subscription_payload):
        subscription = PushSubscription.model_validate(sample_subscription_payload)

        first = await subscription_repo.save(subscription)
        second = await subscription_repo.save(subscription)

        assert first == second
        assert first.startswith("sub:")
        assert await subscription_repo.count() == 1

    @pytest.mark.asyncio
    async def test_find_all_and_delete(self, subscription_repo, redis_client, sample_subscription_payload):
        key = await subscription_repo.save(PushSubscription.model_validate(sample_subscription_payload))
        await redis_client.set("sub:broken", "not json")

        pairs = await subscription_repo.find_all()

        assert [k for k, _ in pairs] == [key]
        assert pairs[0][1].endpoint == sample_subscription_payload["endpoint"]
        assert await subscription_repo.delete(key)
        assert not await subscription_repo.delete(key)
