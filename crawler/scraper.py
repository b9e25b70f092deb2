"""Page fetching, content extraction and web search helpers for providers."""
import asyncio
import logging
from typing import List, Optional
from urllib.parse import quote
import aiohttp
from bs4 import BeautifulSoup

from shared.config import Settings, settings as default_settings
from shared.errors import ScrapeError
from shared.utils import clean_html_text

logger = logging.getLogger(__name__)

SCRAPEDO_URL = "https://api.scrape.do"
SERPER_URL = "https://google.serper.dev/search"

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)

__all__ = ["ArticleScraper", "clean_html_text"]


def _is_turkish(url: str) -> bool:
    return ".tr" in url or "eksisozluk" in url


class ArticleScraper:
    """Fetches pages directly or through Scrape.do and extracts readable text."""

    def __init__(self, settings: Optional[Settings] = None, timeout: int = None):
        self.settings = settings or default_settings
        self.timeout = timeout or self.settings.fetch_timeout

    def _headers(self, url: str) -> dict:
        return {
            "User-Agent": BROWSER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
            "Accept-Language": "tr-TR,tr;q=0.9,en-US;q=0.8,en;q=0.7" if _is_turkish(url) else "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }

    async def fetch_html(self, url: str) -> str:
        """
        Fetch a page as text.

        Goes through Scrape.do when configured and falls back to a direct
        fetch if that fails. Raises ScrapeError when the direct fetch fails.
        """
        if self.settings.scrapedo_api_key:
            try:
                return await self._fetch_via_scrapedo(url)
            except (ScrapeError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(f"Scrape.do failed for {url}, falling back to direct fetch: {e}")

        return await self._fetch_direct(url)

    async def _fetch_via_scrapedo(self, url: str) -> str:
        proxied = f"{SCRAPEDO_URL}?token={self.settings.scrapedo_api_key}&url={quote(url, safe='')}"
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={"User-Agent": "Mozilla/5.0 (compatible; NewsAggregator/1.0)"}
        ) as session:
            async with session.get(proxied) as response:
                if response.status >= 400:
                    raise ScrapeError(url, f"Scrape.do returned HTTP {response.status}")
                logger.info(f"Fetched {url} via Scrape.do")
                return await response.text()

    async def _fetch_direct(self, url: str) -> str:
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self._headers(url)
            ) as session:
                async with session.get(url) as response:
                    if response.status >= 400:
                        raise ScrapeError(url, f"HTTP Error {response.status}")
                    return await response.text()
        except asyncio.TimeoutError:
            raise ScrapeError(url, f"Timeout after {self.timeout} seconds")
        except aiohttp.ClientError as e:
            raise ScrapeError(url, f"Network error: {str(e)}")

    def extract_article_content(self, html: str) -> str:
        """
        Extract the main text of an article page.

        Tries article-like containers first and falls back to the full page text.
        """
        soup = BeautifulSoup(html, "html.parser")

        for element in soup.find_all(["script", "style", "noscript", "iframe"]):
            element.decompose()

        candidates = [
            soup.find("article"),
            soup.find("div", class_=lambda c: c and "content" in c),
            soup.find("div", class_=lambda c: c and "article" in c),
            soup.find("div", id="content"),
            soup.find("main"),
        ]
        for element in candidates:
            if element is None:
                continue
            content = clean_html_text(element.get_text(separator=" "))
            if len(content) > 100:
                return content

        return clean_html_text(soup.get_text(separator=" "))

    async def search(self, query: str, num: int = 8, gl: str = "tr", hl: str = "tr") -> List[str]:
        """
        Run a web search and return readable snippets.

        Answer-box summaries come first, then one line per organic result.
        Returns an empty list when search is not configured.
        """
        if not self.settings.serper_api_key:
            logger.warning("SERPER_API_KEY not configured, skipping search")
            return []

        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as session:
            async with session.post(
                SERPER_URL,
                json={"q": query, "num": num, "gl": gl, "hl": hl},
                headers={"X-API-KEY": self.settings.serper_api_key, "Content-Type": "application/json"}
            ) as response:
                if response.status >= 400:
                    raise ScrapeError(SERPER_URL, f"Search returned HTTP {response.status}")
                data = await response.json(content_type=None)

        return self._parse_search_results(data or {})

    def _parse_search_results(self, data: dict) -> List[str]:
        snippets = []
        answer_box = data.get("answerBox") or {}
        if answer_box.get("snippet"):
            snippets.append(f"Özet: {answer_box['snippet']}")
        if answer_box.get("answer"):
            snippets.append(f"Cevap: {answer_box['answer']}")

        for result in data.get("organic") or []:
            if result.get("snippet"):
                snippets.append(f"{result.get('title', '')}: {result['snippet']}")

        return snippets

