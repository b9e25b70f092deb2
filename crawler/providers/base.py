"""Base class for news providers."""
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional
import aiohttp

from api.models.article import Article, NewsSource, build_article_id
from api.models.provider import ProviderConfig
from crawler.scraper import ArticleScraper
from shared.config import Settings, settings as default_settings
from shared.errors import ProviderError

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """A pluggable news source: crawls headlines and optionally enriches them."""

    source: NewsSource

    def __init__(self, config: ProviderConfig, settings: Optional[Settings] = None,
                 scraper: Optional[ArticleScraper] = None):
        self.config = config
        self.settings = settings or default_settings
        self.scraper = scraper or ArticleScraper(self.settings)

    @property
    def id(self) -> str:
        return self.config.id

    @abstractmethod
    async def crawl(self, limit: int) -> List[Article]:
        """Fetch up to ``limit`` raw articles. Raises ProviderError on failure."""

    async def enrich(self, article: Article) -> Article:
        """Return the article with fuller content. Default is no enrichment."""
        return article

    def can_run(self) -> bool:
        """Report whether the provider has the configuration it needs."""
        return True

    def generate_id(self, opaque) -> str:
        return build_article_id(self.source, str(opaque))

    async def _get_json(self, url: str, headers: Optional[dict] = None) -> Any:
        """GET ``url`` and decode JSON; non-2xx raises ProviderError."""
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.settings.fetch_timeout),
            headers=headers
        ) as session:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise ProviderError(self.id, f"GET {url} returned HTTP {response.status}")
                return await response.json(content_type=None)

    async def _get_text(self, url: str, headers: Optional[dict] = None) -> str:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.settings.fetch_timeout),
            headers=headers
        ) as session:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise ProviderError(self.id, f"GET {url} returned HTTP {response.status}")
                return await response.text()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
