"""Pipeline worker: crawl, store, enrich and announce new articles."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from api.models.article import Article
from api.models.provider import ProviderResult
from api.services.article_service import ArticleService
from api.services.push_service import PushResult, PushService
from crawler.registry import ProviderRegistry
from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class PipelineRun:
    """Summary of one pipeline run."""
    results: List[ProviderResult] = field(default_factory=list)
    processed: List[Article] = field(default_factory=list)
    notified: Optional[PushResult] = None

    @property
    def crawled(self) -> int:
        return sum(len(r.articles) for r in self.results)

    @property
    def errors(self) -> List[str]:
        return [f"{r.provider_id}: {e}" for r in self.results for e in r.errors]


class PipelineWorker:
    """Runs crawl, save-raw, enrich, re-save and notify as one sequence."""

    def __init__(
        self,
        registry: ProviderRegistry,
        article_service: ArticleService,
        push_service: PushService,
        settings: Optional[Settings] = None
    ):
        self.registry = registry
        self.article_service = article_service
        self.push_service = push_service
        self.settings = settings or default_settings

    async def run(self, sources: List[str], limit: int, notify: bool = True) -> PipelineRun:
        """Crawl ``sources``, or every enabled provider when the list is empty."""
        if sources:
            logger.info(f"Pipeline run: sources={','.join(sources)}, limit={limit}")
            results = await self.registry.crawl_multiple(sources, limit)
        else:
            logger.info(f"Pipeline run: all enabled providers, limit={limit}")
            results = await self.registry.crawl_all(limit)
        run = PipelineRun(results=results)
        for error in run.errors:
            logger.warning(f"Crawl error: {error}")

        articles = [article for result in run.results for article in result.articles]
        logger.info(f"Collected {len(articles)} articles")
        if not articles:
            return run

        saved = await self.article_service.save_raw_articles(articles)
        run.processed = await self._enrich(saved)
        logger.info(f"Processed {len(run.processed)}/{len(articles)} articles")

        if notify and run.processed:
            try:
                run.notified = await self.push_service.send_notifications(run.processed)
            except Exception as e:
                logger.error(f"Push fan-out failed: {e}")
        return run

    async def _enrich(self, articles: List[Article]) -> List[Article]:
        """Transform and illustrate articles in bounded batches."""
        processed: List[Article] = []
        size = self.settings.batch_size
        for start in range(0, len(articles), size):
            batch = articles[start:start + size]
            outcomes = await asyncio.gather(
                *(self.article_service.process_article(a) for a in batch),
                return_exceptions=True
            )
            for article, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"Failed to process {article.id}: {outcome}")
                else:
                    processed.append(outcome)
            if start + size < len(articles):
                await asyncio.sleep(self.settings.batch_delay)
        return processed
