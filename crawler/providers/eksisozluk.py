"""Ekşi Sözlük provider: trending topics with context from web search."""
import html
import logging
from typing import List
from bs4 import BeautifulSoup

from api.models.article import Article, Language, NewsSource
from api.models.provider import ProviderConfig
from crawler.providers.base import BaseProvider
from shared.utils import generate_opaque_id

logger = logging.getLogger(__name__)

GUNDEM_URL = "https://eksisozluk.com/basliklar/gundem"
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "tr-TR,tr;q=0.9,en-US;q=0.8,en;q=0.7",
    "Referer": "https://eksisozluk.com/",
}


class EksisozlukProvider(BaseProvider):
    """Topics from the Ekşi Sözlük "gündem" page.

    Topic pages carry no article text, so enrichment builds the content
    from web search snippets about the topic.
    """

    source = NewsSource.EKSISOZLUK

    def __init__(self, settings=None, scraper=None):
        super().__init__(
            ProviderConfig(
                id="eksisozluk",
                name="Ekşi Sözlük",
                language=Language.TR,
                default_limit=5,
                fetch_full_content=True,
            ),
            settings,
            scraper,
        )

    def can_run(self) -> bool:
        return self.settings.has_feature("search")

    async def crawl(self, limit: int) -> List[Article]:
        page = await self._get_text(GUNDEM_URL, headers=HEADERS)
        articles = self.parse_topics(page, limit)
        logger.info(f"[{self.config.name}] Found {len(articles)} topics")
        return articles

    def parse_topics(self, page: str, limit: int) -> List[Article]:
        soup = BeautifulSoup(page, "html.parser")
        articles = []
        for heading in soup.find_all("h1", attrs={"data-title": True, "data-slug": True}):
            title = html.unescape(heading["data-title"]).strip()
            slug = heading["data-slug"].strip()
            if not title or not slug:
                continue
            articles.append(Article(
                id=self.generate_id(generate_opaque_id()),
                source=self.source,
                original_title=title,
                original_content="",
                original_url=f"https://eksisozluk.com/{slug}",
                language=Language.TR,
            ))
            if len(articles) >= limit:
                break
        return articles

    async def enrich(self, article: Article) -> Article:
        """Fill content from search snippets.

        Tries a news-focused query first and the bare title second. If both
        come back empty the title itself becomes the content.
        """
        title = article.original_title or article.original_url.rsplit("/", 1)[-1].replace("-", " ")

        snippets = await self._search(f"{title} haber -site:eksisozluk.com")
        if not snippets:
            snippets = await self._search(title)

        if not snippets:
            logger.warning(f"[{self.config.name}] No snippets found for {title!r}")
            return article.model_copy(update={"original_content": title})

        logger.info(f"[{self.config.name}] Collected {len(snippets)} snippets for {title!r}")
        return article.model_copy(update={"original_content": "\n\n".join(snippets)})

    async def _search(self, query: str) -> List[str]:
        try:
            return await self.scraper.search(query, num=8, gl="tr", hl="tr")
        except Exception as e:
            logger.error(f"[{self.config.name}] Search failed for {query!r}: {e}")
            return []
