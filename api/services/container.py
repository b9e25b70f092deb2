"""Wires repositories, services, the provider registry and the pipeline worker."""
from dataclasses import dataclass
from typing import Optional
import redis.asyncio as redis
from motor.motor_asyncio import AsyncIOMotorCollection

from api.services.article_service import ArticleService
from api.services.image_service import ImageService
from api.services.push_service import PushService
from api.services.rate_limiter import RateLimiter
from api.services.transform_service import TransformService
from crawler.registry import ProviderRegistry, build_registry
from crawler.transformer import ContentTransformer
from crawler.worker import PipelineWorker
from database.blob_store import BlobStore
from database.repositories.article_repo import ArticleRepository
from database.repositories.index_repo import IndexRepository
from database.repositories.subscription_repo import SubscriptionRepository
from shared.config import Settings, settings as default_settings


@dataclass
class Services:
    settings: Settings
    registry: ProviderRegistry
    article_repo: ArticleRepository
    index_repo: IndexRepository
    subscription_repo: SubscriptionRepository
    article_service: ArticleService
    transform_service: TransformService
    image_service: ImageService
    push_service: PushService
    rate_limiter: RateLimiter
    worker: PipelineWorker


def build_services(
    redis_client: redis.Redis,
    blob_collection: AsyncIOMotorCollection,
    settings: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None
) -> Services:
    """Build one process-wide set of services over the given connections."""
    settings = settings or default_settings
    registry = registry or build_registry(settings)

    article_repo = ArticleRepository(BlobStore(blob_collection))
    index_repo = IndexRepository(redis_client, settings)
    subscription_repo = SubscriptionRepository(redis_client)

    transformer = ContentTransformer(settings)
    image_service = ImageService(article_repo, settings)
    article_service = ArticleService(article_repo, index_repo, image_service, transformer, settings)
    push_service = PushService(subscription_repo, settings)

    return Services(
        settings=settings,
        registry=registry,
        article_repo=article_repo,
        index_repo=index_repo,
        subscription_repo=subscription_repo,
        article_service=article_service,
        transform_service=TransformService(article_repo, transformer, settings),
        image_service=image_service,
        push_service=push_service,
        rate_limiter=RateLimiter(redis_client, settings),
        worker=PipelineWorker(registry, article_service, push_service, settings),
    )
