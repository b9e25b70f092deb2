"""Article service: reading, saving and processing articles."""
import logging
from typing import List, Optional

from api.models.article import Article
from api.services.image_service import ImageService
from crawler.transformer import ContentTransformer
from database.repositories.article_repo import ArticleRepository
from database.repositories.index_repo import IndexRepository
from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class ArticleService:
    """Coordinates the article store, the recency index and enrichment steps."""

    def __init__(
        self,
        article_repo: ArticleRepository,
        index_repo: IndexRepository,
        image_service: ImageService,
        transformer: Optional[ContentTransformer] = None,
        settings: Optional[Settings] = None
    ):
        self.article_repo = article_repo
        self.index_repo = index_repo
        self.image_service = image_service
        self.settings = settings or default_settings
        self.transformer = transformer or ContentTransformer(self.settings)

    async def get_article(self, article_id: str, source) -> Optional[Article]:
        return await self.article_repo.find_by_id(article_id, source)

    async def list_articles(self, source=None, limit: Optional[int] = None) -> List[Article]:
        """Newest articles first, optionally for a single source."""
        limit = limit or self.settings.default_article_limit
        ids = (await self.index_repo.get(source))[:limit]
        articles = await self.article_repo.find_many(ids)
        logger.info(f"Listing articles: source={source}, limit={limit}, found {len(articles)}/{len(ids)}")
        return articles

    async def save_raw_article(self, article: Article) -> Article:
        """Save an article as crawled and put it at the head of the index."""
        saved = await self.article_repo.save(article)
        await self.index_repo.add(saved.id, saved.source)
        logger.info(f"Saved raw article {article.id}")
        return saved

    async def save_raw_articles(self, articles: List[Article]) -> List[Article]:
        saved = []
        for article in articles:
            try:
                saved.append(await self.save_raw_article(article))
            except Exception as e:
                logger.error(f"Failed to save raw article {article.id}: {e}")
        logger.info(f"Saved {len(saved)}/{len(articles)} raw articles")
        return saved

    async def process_article(self, article: Article) -> Article:
        """
        Transform, illustrate and store an article.

        If storing the enriched article fails, the unmodified original is
        saved instead. Raises only when that fallback save fails too. The
        index update afterwards is best-effort and never rewrites the record.
        """
        logger.info(f"Processing {article.id}...")
        try:
            outcome = await self.transformer.transform(article)
            image = await self.image_service.generate_article_image(outcome.article)
            saved = await self.article_repo.save(outcome.article, image.thumbnail_url)
            logger.info(f"Processed {article.id} (transformed={outcome.applied}, image={image.provider})")
        except Exception as e:
            logger.error(f"Error processing {article.id}: {e}")
            try:
                logger.info(f"Fallback: saving original {article.id}")
                saved = await self.article_repo.save(article)
            except Exception as save_error:
                logger.critical(f"Failed to save {article.id}: {save_error}")
                raise

        try:
            await self.index_repo.add(saved.id, saved.source)
        except Exception as e:
            logger.error(f"Failed to index {saved.id}: {e}")
        return saved
