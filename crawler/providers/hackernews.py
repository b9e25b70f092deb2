"""Hacker News provider backed by the Firebase API."""
import asyncio
import logging
from typing import List, Optional

from api.models.article import Article, Language, NewsSource
from api.models.provider import ProviderConfig
from crawler.providers.base import BaseProvider
from shared.utils import clean_html_text, from_unix_timestamp

logger = logging.getLogger(__name__)

HN_API = "https://hacker-news.firebaseio.com/v0"
MAX_COMMENTS = 5


class HackerNewsProvider(BaseProvider):
    """Top stories from Hacker News."""

    source = NewsSource.HACKERNEWS

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(
                id="hackernews",
                name="Hacker News",
                language=Language.EN,
                default_limit=15,
                fetch_full_content=True,
            ),
            settings,
            scraper,
        )

    async def crawl(self, limit: int) -> List[Article]:
        story_ids = await self._get_json(f"{HN_API}/topstories.json") or []

        articles = []
        for story_id in story_ids[:limit]:
            try:
                item = await self._get_json(f"{HN_API}/item/{story_id}.json")
            except Exception as e:
                logger.error(f"[{self.config.name}] Error fetching item {story_id}: {e}")
                continue
            article = self._to_article(story_id, item)
            if article:
                articles.append(article)

        logger.info(f"[{self.config.name}] Crawled {len(articles)} articles")
        return articles

    def _to_article(self, story_id, item: Optional[dict]) -> Optional[Article]:
        if not item or not item.get("title"):
            return None
        return Article(
            id=self.generate_id(story_id),
            source=self.source,
            original_title=item["title"],
            original_content=clean_html_text(item.get("text") or "") or item["title"],
            original_url=item.get("url") or f"https://news.ycombinator.com/item?id={story_id}",
            language=Language.EN,
            published_at=from_unix_timestamp(item.get("time")),
            tags=[item["type"]] if item.get("type") else [],
        )

    async def enrich(self, article: Article) -> Article:
        """Append the top comments to self posts that link back to Hacker News."""
        if "news.ycombinator.com" not in article.original_url:
            return article

        item_id = article.id.partition("-")[2]
        item = await self._get_json(f"{HN_API}/item/{item_id}.json") or {}
        kids = (item.get("kids") or [])[:MAX_COMMENTS]
        if not kids:
            return article

        comments = await asyncio.gather(
            *(self._get_json(f"{HN_API}/item/{kid}.json") for kid in kids),
            return_exceptions=True
        )
        texts = [
            clean_html_text(comment["text"])
            for comment in comments
            if isinstance(comment, dict) and comment.get("text")
        ]
        if not texts:
            return article

        return article.model_copy(update={
            "original_content": f"{article.original_title}\n\n" + "\n\n---\n\n".join(texts)
        })
