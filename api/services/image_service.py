"""Image service: picks a thumbnail for each article."""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote
import aiohttp

from api.models.article import Article
from crawler.thumbnail import ThumbnailGenerator
from database.repositories.article_repo import ArticleRepository
from shared.config import Settings, settings as default_settings
from shared.utils import string_hash

logger = logging.getLogger(__name__)

UNSPLASH_URL = "https://api.unsplash.com/photos/random"
DICEBEAR_STYLES = ["shapes", "rings", "pixel-art", "identicon", "thumbs"]
DICEBEAR_BACKGROUNDS = "b6e3f4,c0aede,d1d4f9,ffd5dc,ffdfbf"
PLACEHOLDER_COLORS = [
    "FF6B6B",
    "6C5CE7",
    "FD79A8",
    "00B894",
    "E17055",
    "0984E3",
]


@dataclass
class ImageResult:
    """Thumbnail chosen for an article and where it came from."""
    article_id: str
    success: bool
    thumbnail_url: Optional[str] = None
    provider: Optional[str] = None
    error: Optional[str] = None


def dicebear_url(article_id: str) -> str:
    style = DICEBEAR_STYLES[abs(string_hash(article_id)) % len(DICEBEAR_STYLES)]
    return (
        f"https://api.dicebear.com/7.x/{style}/png?seed={quote(article_id, safe='')}"
        f"&size=512&backgroundColor={DICEBEAR_BACKGROUNDS}"
    )


def picsum_url() -> str:
    return f"https://picsum.photos/seed/{random.randint(0, 999)}/800/600"


def simple_thumbnail_url(article: Article) -> str:
    """Deterministic text placeholder keyed by the article id."""
    color = PLACEHOLDER_COLORS[abs(string_hash(article.id)) % len(PLACEHOLDER_COLORS)]
    text = quote(article.display_title[:50], safe="")
    return f"https://placehold.co/400x300/{color}/FFFFFF/png?text={text}"


def unsplash_query(title: str) -> str:
    keywords = [word for word in title.lower().split(" ") if len(word) > 4][:3]
    return ",".join(keywords) or "technology,news"


class ImageService:
    """Thumbnail ladder: AI image, stock photo, DiceBear, Lorem Picsum."""

    def __init__(
        self,
        article_repo: ArticleRepository,
        settings: Optional[Settings] = None,
        generator: Optional[ThumbnailGenerator] = None
    ):
        self.article_repo = article_repo
        self.settings = settings or default_settings
        self.generator = generator or ThumbnailGenerator(self.settings)

    def _ai_enabled(self) -> bool:
        return self.settings.enable_ai_images and self.settings.has_feature("image-generation")

    async def generate_article_image(self, article: Article) -> ImageResult:
        """
        Choose a thumbnail for an article. Never raises.

        AI images are stored in the blob store and served from
        ``/thumbnails``; the other rungs are direct third-party URLs.
        """
        try:
            if self._ai_enabled():
                image = await self.generator.generate(article)
                if image is not None:
                    path = await self.article_repo.save_thumbnail(article.id, image.data, image.content_type)
                    logger.info(f"Stored AI thumbnail for {article.id} at {path}")
                    return ImageResult(article.id, True, self._public_url(path), "ai")
                logger.warning(f"AI image generation failed for {article.id}, falling back to free services")

            if self.settings.has_feature("stock-photos"):
                url = await self._unsplash_url(article)
                if url:
                    return ImageResult(article.id, True, url, "unsplash")

            return ImageResult(article.id, True, dicebear_url(article.id), "dicebear")
        except Exception as e:
            logger.error(f"Error generating image for {article.id}: {e}")
            return ImageResult(article.id, True, picsum_url(), "picsum", str(e))

    def _public_url(self, path: str) -> str:
        base = self.settings.public_base_url.rstrip("/")
        return f"{base}{path}" if base else path

    async def _unsplash_url(self, article: Article) -> Optional[str]:
        query = unsplash_query(article.display_title)
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.fetch_timeout)
            ) as session:
                async with session.get(
                    UNSPLASH_URL,
                    params={"query": query, "orientation": "landscape"},
                    headers={"Authorization": f"Client-ID {self.settings.unsplash_api_key}"}
                ) as response:
                    if response.status >= 400:
                        logger.error(f"Unsplash API error: {response.status}")
                        return None
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Unsplash error: {e}")
            return None

        urls = (data or {}).get("urls") or {}
        return urls.get("regular") or urls.get("small")
