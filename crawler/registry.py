"""Provider registry: lookup and fault-isolated crawling across providers."""
import asyncio
import logging
import time
from typing import Dict, List, Optional

from api.models.article import Article, Language
from api.models.provider import ProviderResult
from crawler.providers import (
    BaseProvider,
    BBCProvider,
    EksisozlukProvider,
    HackerNewsProvider,
    RedditProvider,
    T24Provider,
    WebrazziProvider,
    WikipediaProvider,
)
from crawler.scraper import ArticleScraper
from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Holds the providers known to this process, keyed by provider id."""

    def __init__(self):
        self._providers: Dict[str, BaseProvider] = {}

    def register(self, provider: BaseProvider):
        self._providers[provider.id] = provider
        logger.info(f"Registered provider: {provider.id}")

    def unregister(self, provider_id: str):
        self._providers.pop(provider_id, None)
        logger.info(f"Unregistered provider: {provider_id}")

    def get(self, provider_id: str) -> Optional[BaseProvider]:
        return self._providers.get(provider_id)

    def has(self, provider_id: str) -> bool:
        return provider_id in self._providers

    def count(self) -> int:
        return len(self._providers)

    def list_provider_ids(self) -> List[str]:
        return list(self._providers)

    def get_all(self) -> List[BaseProvider]:
        return list(self._providers.values())

    def get_enabled(self) -> List[BaseProvider]:
        """Providers that are enabled and report they can run."""
        return [p for p in self.get_all() if p.config.enabled and p.can_run()]

    def get_by_language(self, language) -> List[BaseProvider]:
        language = Language(language)
        return [p for p in self.get_enabled() if p.config.language == language]

    async def crawl_provider(self, provider_id: str, limit: int) -> ProviderResult:
        """
        Crawl one provider and enrich its articles.

        Never raises: unknown, disabled or unconfigured providers and crawl
        failures are reported through ``errors``. A failed enrichment keeps
        the un-enriched article.
        """
        provider = self.get(provider_id)
        if provider is None:
            return ProviderResult(provider_id=provider_id, errors=[f"Provider {provider_id} not found"])
        if not provider.config.enabled:
            return ProviderResult(provider_id=provider_id, errors=[f"Provider {provider_id} is disabled"])
        if not provider.can_run():
            return ProviderResult(
                provider_id=provider_id,
                errors=[f"Provider {provider_id} cannot run (missing configuration)"]
            )

        started = time.monotonic()
        try:
            logger.info(f"Crawling {provider_id}...")
            articles = await provider.crawl(limit)
        except Exception as e:
            logger.error(f"Error crawling {provider_id}: {e}")
            return ProviderResult(
                provider_id=provider_id,
                errors=[str(e) or type(e).__name__],
                duration_ms=int((time.monotonic() - started) * 1000)
            )

        errors: List[str] = []
        enriched = await asyncio.gather(
            *(self._enrich(provider, article, errors) for article in articles)
        )

        duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"Crawled {len(enriched)} articles from {provider_id} in {duration_ms}ms")
        return ProviderResult(
            provider_id=provider_id,
            articles=list(enriched),
            errors=errors,
            duration_ms=duration_ms
        )

    async def _enrich(self, provider: BaseProvider, article: Article, errors: List[str]) -> Article:
        try:
            return await provider.enrich(article)
        except Exception as e:
            logger.warning(f"Enrichment failed for {article.id}: {e}")
            errors.append(f"Enrichment failed for {article.id}: {e}")
            return article

    async def crawl_multiple(self, provider_ids: List[str], limit: int) -> List[ProviderResult]:
        """Crawl several providers in parallel; results follow ``provider_ids`` order."""
        logger.info(f"Crawling {len(provider_ids)} providers...")
        outcomes = await asyncio.gather(
            *(self.crawl_provider(pid, limit) for pid in provider_ids),
            return_exceptions=True
        )

        results = []
        for provider_id, outcome in zip(provider_ids, outcomes):
            if isinstance(outcome, BaseException):
                results.append(ProviderResult(provider_id=provider_id, errors=[str(outcome) or type(outcome).__name__]))
            else:
                results.append(outcome)
        return results

    async def crawl_all(self, limit: int) -> List[ProviderResult]:
        return await self.crawl_multiple([p.id for p in self.get_enabled()], limit)


def build_registry(settings: Optional[Settings] = None) -> ProviderRegistry:
    """Create the registry with every built-in provider sharing one scraper."""
    settings = settings or default_settings
    scraper = ArticleScraper(settings)

    registry = ProviderRegistry()
    for provider_cls in (
        HackerNewsProvider,
        RedditProvider,
        WikipediaProvider,
        T24Provider,
        BBCProvider,
        WebrazziProvider,
        EksisozlukProvider,
    ):
        registry.register(provider_cls(settings, scraper))
    return registry
