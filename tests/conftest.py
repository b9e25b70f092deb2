"""Pytest configuration and fixtures."""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import fakeredis
from mongomock_motor import AsyncMongoMockClient

from api.models.article import Article, Language, NewsSource
from database.blob_store import BlobStore
from database.repositories.article_repo import ArticleRepository
from database.repositories.index_repo import IndexRepository
from database.repositories.subscription_repo import SubscriptionRepository
from shared.config import Settings


@pytest.fixture
def settings():
    """Settings with no third-party credentials and no pauses between batches."""
    return Settings(
        _env_file=None,
        admin_api_key="test-admin-key",
        openrouter_api_key=None,
        gemini_api_key=None,
        unsplash_api_key=None,
        serper_api_key=None,
        scrapedo_api_key=None,
        reddit_client_id=None,
        reddit_client_secret=None,
        vapid_subject=None,
        vapid_private_key=None,
        batch_delay=0,
        environment="test",
    )


@pytest.fixture
def redis_client():
    """In-memory Redis."""
    return fakeredis.FakeAsyncRedis(decode_responses=True)


@pytest.fixture
def blob_collection():
    """In-memory MongoDB collection backing the blob store."""
    client = AsyncMongoMockClient()
    return client["news_pipeline_test"]["blobs"]


@pytest.fixture
def blob_store(blob_collection):
    return BlobStore(blob_collection)


@pytest.fixture
def article_repo(blob_store):
    return ArticleRepository(blob_store)


@pytest.fixture
def index_repo(redis_client, settings):
    return IndexRepository(redis_client, settings)


@pytest.fixture
def subscription_repo(redis_client):
    return SubscriptionRepository(redis_client)


@pytest.fixture
def sample_article():
    """Create a sample Hacker News article."""
    return Article(
        id="hn-41000001",
        source=NewsSource.HACKERNEWS,
        original_title="Show HN: A tiny database written in a weekend",
        original_content="A walkthrough of building a small key-value store with a write-ahead log "
                         "and compaction, plus benchmarks against SQLite.",
        original_url="https://example.com/tiny-db",
        language=Language.EN,
        crawled_at=datetime(2024, 2, 4, 10, 30, tzinfo=timezone.utc),
        tags=["hackernews"],
    )


@pytest.fixture
def sample_turkish_article():
    """Create a sample T24 article with a short description."""
    return Article(
        id="t24-abc123",
        source=NewsSource.T24,
        original_title="Ekonomide yeni dönem",
        original_content="Kısa özet",
        original_url="https://t24.com.tr/haber/ekonomide-yeni-donem",
        language=Language.TR,
        crawled_at=datetime(2024, 2, 4, 11, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_subscription_payload():
    return {
        "endpoint": "https://push.example.com/send/abc123",
        "expirationTime": None,
        "keys": {
            "p256dh": "BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM",
            "auth": "tBHItJI5svbpez7KI4CCXg"
        }
    }


@pytest.fixture
def mock_transformer():
    """Transformer whose model call is never made."""
    transformer = MagicMock()
    transformer.transform = AsyncMock()
    return transformer
