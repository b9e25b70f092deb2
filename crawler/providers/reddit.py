"""Reddit provider: hot posts from a few news subreddits."""
import logging
from typing import List, Optional
import aiohttp

from api.models.article import Article, Language, NewsSource
from api.models.provider import ProviderConfig
from crawler.providers.base import BaseProvider
from shared.errors import ProviderError
from shared.utils import from_unix_timestamp

logger = logging.getLogger(__name__)

SUBREDDITS = ["news", "worldnews", "technology"]
TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
USER_AGENT = "news-aggregator/1.0"


class RedditProvider(BaseProvider):
    """Hot posts from r/news, r/worldnews and r/technology.

    Uses an OAuth client-credentials token when configured and the public
    JSON listing otherwise.
    """

    source = NewsSource.REDDIT

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(
                id="reddit",
                name="Reddit",
                language=Language.EN,
                default_limit=15,
            ),
            settings,
            scraper,
        )

    async def crawl(self, limit: int) -> List[Article]:
        token = await self._get_access_token()

        articles = []
        failures = 0
        for subreddit in SUBREDDITS:
            try:
                data = await self._fetch_listing(subreddit, token)
            except Exception as e:
                failures += 1
                logger.error(f"[{self.config.name}] Error fetching r/{subreddit}: {e}")
                continue
            articles.extend(self._parse_posts(data, subreddit))

        if failures == len(SUBREDDITS):
            raise ProviderError(self.id, "all subreddit listings failed")

        logger.info(f"[{self.config.name}] Crawled {len(articles)} posts")
        return articles[:limit]

    async def _get_access_token(self) -> Optional[str]:
        if not self.settings.has_feature("reddit"):
            return None
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.fetch_timeout)
            ) as session:
                async with session.post(
                    TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=aiohttp.BasicAuth(self.settings.reddit_client_id, self.settings.reddit_client_secret),
                    headers={"User-Agent": USER_AGENT}
                ) as response:
                    if response.status >= 400:
                        logger.warning(f"[{self.config.name}] Token request failed: HTTP {response.status}")
                        return None
                    data = await response.json(content_type=None)
                    return data.get("access_token")
        except aiohttp.ClientError as e:
            logger.warning(f"[{self.config.name}] Token request failed: {e}")
            return None

    async def _fetch_listing(self, subreddit: str, token: Optional[str]) -> dict:
        if token:
            try:
                return await self._get_json(
                    f"https://oauth.reddit.com/r/{subreddit}/hot.json?limit=10",
                    headers={"Authorization": f"Bearer {token}", "User-Agent": USER_AGENT}
                )
            except ProviderError as e:
                logger.warning(f"[{self.config.name}] OAuth listing failed, using public API: {e}")

        return await self._get_json(
            f"https://www.reddit.com/r/{subreddit}/hot.json?limit=10",
            headers={"User-Agent": USER_AGENT}
        )

    def _parse_posts(self, data: dict, subreddit: str) -> List[Article]:
        articles = []
        for child in ((data or {}).get("data") or {}).get("children") or []:
            post = child.get("data") or {}
            if not post.get("title") or not post.get("id"):
                continue
            tags = [subreddit]
            if post.get("link_flair_text"):
                tags.append(post["link_flair_text"])
            articles.append(Article(
                id=self.generate_id(post["id"]),
                source=self.source,
                original_title=post["title"],
                original_content=post.get("selftext") or post["title"],
                original_url=post.get("url") or f"https://reddit.com{post.get('permalink', '')}",
                language=Language.EN,
                published_at=from_unix_timestamp(post.get("created_utc")),
                tags=tags,
            ))
        return articles
