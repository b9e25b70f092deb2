"""RSS feed providers: T24, BBC World and Webrazzi."""
import logging
from datetime import datetime, timezone
from typing import List, Optional
import feedparser

from api.models.article import Article, Language, NewsSource
from api.models.provider import ProviderConfig
from crawler.providers.base import BaseProvider
from shared.utils import clean_html_text, generate_opaque_id

logger = logging.getLogger(__name__)

SHORT_DESCRIPTION = 100


def _published_at(entry) -> Optional[datetime]:
    """feedparser normalizes pubDate/updated to a UTC struct_time."""
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime(*parsed[:6], tzinfo=timezone.utc)


class RSSProvider(BaseProvider):
    """Provider reading items from an RSS 2.0 feed.

    Subclasses set ``source``, ``feed_url`` and their ``ProviderConfig``.
    Enrichment fetches the article page only when the feed description is short.
    """

    feed_url: str

    async def crawl(self, limit: int) -> List[Article]:
        xml = await self._get_text(self.feed_url, headers={"User-Agent": "Mozilla/5.0 (compatible; NewsAggregator/1.0)"})
        articles = self.parse_feed(xml, limit)
        logger.info(f"[{self.config.name}] Crawled {len(articles)} articles from RSS")
        return articles

    def parse_feed(self, xml: str, limit: int) -> List[Article]:
        feed = feedparser.parse(xml)
        if feed.get("bozo") and not feed.entries:
            logger.warning(f"[{self.config.name}] Unreadable feed: {feed.get('bozo_exception')}")

        articles = []
        for entry in feed.entries:
            title = clean_html_text(entry.get("title", ""))
            link = entry.get("link", "").strip()
            if not title or not link:
                continue
            articles.append(Article(
                id=self.generate_id(generate_opaque_id()),
                source=self.source,
                original_title=title,
                original_content=clean_html_text(entry.get("summary", "")),
                original_url=link,
                language=self.config.language,
                published_at=_published_at(entry),
            ))
            if len(articles) >= limit:
                break
        return articles

    async def enrich(self, article: Article) -> Article:
        if len(article.original_content) >= SHORT_DESCRIPTION:
            return article

        html = await self.scraper.fetch_html(article.original_url)
        content = self.scraper.extract_article_content(html)
        if not content:
            return article
        return article.model_copy(update={"original_content": content})


class T24Provider(RSSProvider):
    source = NewsSource.T24
    feed_url = "https://t24.com.tr/rss"

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(id="t24", name="T24", language=Language.TR, default_limit=10, fetch_full_content=True),
            settings,
            scraper,
        )


class BBCProvider(RSSProvider):
    source = NewsSource.BBC
    feed_url = "https://feeds.bbci.co.uk/news/world/rss.xml"

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(id="bbc", name="BBC News", language=Language.EN, default_limit=10, fetch_full_content=True),
            settings,
            scraper,
        )


class WebrazziProvider(RSSProvider):
    source = NewsSource.WEBRAZZI
    feed_url = "https://webrazzi.com/feed/"

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(id="webrazzi", name="Webrazzi", language=Language.TR, default_limit=10, fetch_full_content=True),
            settings,
            scraper,
        )
