"""Wikipedia provider: current events, featured article and "in the news" items."""
import logging
from typing import List

from api.models.article import Article, Language, NewsSource
from api.models.provider import ProviderConfig
from crawler.providers.base import BaseProvider
from shared.utils import clean_html_text, generate_opaque_id, get_utc_now

logger = logging.getLogger(__name__)

REST_API = "https://en.wikipedia.org/api/rest_v1"
HEADERS = {
    "User-Agent": "NewsAggregator/1.0 (news pipeline)",
    "Api-User-Agent": "NewsAggregator/1.0",
}
MAX_NEWS_ITEMS = 5


def _desktop_page(entry: dict, default: str = "") -> str:
    return ((entry or {}).get("content_urls") or {}).get("desktop", {}).get("page") or default


class WikipediaProvider(BaseProvider):
    """Current events and the daily featured feed from English Wikipedia."""

    source = NewsSource.WIKIPEDIA

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(
                id="wikipedia",
                name="Wikipedia",
                language=Language.EN,
                default_limit=10,
            ),
            settings,
            scraper,
        )

    async def crawl(self, limit: int) -> List[Article]:
        summary = await self._get_json(f"{REST_API}/page/summary/Portal:Current_events", headers=HEADERS)
        featured = await self._get_json(
            f"{REST_API}/feed/featured/{get_utc_now().strftime('%Y/%m/%d')}", headers=HEADERS
        )

        articles = []
        if summary and summary.get("extract"):
            articles.append(self._make_article(
                "current-events",
                "Current Events",
                summary["extract"],
                _desktop_page(summary, "https://en.wikipedia.org/wiki/Portal:Current_events"),
                ["current-events"],
            ))

        tfa = (featured or {}).get("tfa")
        if tfa and tfa.get("extract"):
            articles.append(self._make_article(
                "featured",
                tfa.get("title") or "Today's Featured Article",
                tfa["extract"],
                _desktop_page(tfa, "https://en.wikipedia.org"),
                ["featured"],
            ))

        for item in ((featured or {}).get("news") or [])[:MAX_NEWS_ITEMS]:
            story = clean_html_text(item.get("story") or "")
            if not story:
                continue
            links = item.get("links") or [{}]
            articles.append(self._make_article(
                "news", story, story, _desktop_page(links[0], "https://en.wikipedia.org"), ["news"]
            ))

        logger.info(f"[{self.config.name}] Crawled {len(articles)} articles")
        return articles[:limit]

    def _make_article(self, kind: str, title: str, content: str, url: str, tags: List[str]) -> Article:
        return Article(
            id=self.generate_id(f"{kind}-{generate_opaque_id()}"),
            source=self.source,
            original_title=title,
            original_content=content,
            original_url=url,
            language=Language.EN,
            tags=tags,
        )
