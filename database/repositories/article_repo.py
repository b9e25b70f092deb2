"""Article repository for article records, variants and thumbnails in the blob store."""
import asyncio
import logging
from typing import Optional, List

from pydantic import ValidationError as PydanticValidationError

from api.models.article import Article, ArticleVariant, TransformVariant, source_for_article_id
from database.blob_store import BlobStore, StoredObject

logger = logging.getLogger(__name__)

_VARIANT_NAMES = {variant.value for variant in TransformVariant}

THUMBNAIL_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
}


def article_key(article_id: str, source: str) -> str:
    return f"articles/{source}/{article_id}.json"


def variant_prefix(article_id: str, source: str) -> str:
    return f"articles/{source}/{article_id}/variants/"


def variant_key(article_id: str, source: str, variant: str) -> str:
    return f"{variant_prefix(article_id, source)}{variant}.json"


def _source_value(source) -> str:
    return getattr(source, "value", source)


def _variant_value(variant) -> str:
    return getattr(variant, "value", variant)


class ArticleRepository:
    """Repository for Article records stored as JSON objects."""

    def __init__(self, store: BlobStore):
        self.store = store

    async def save(self, article: Article, thumbnail_url: Optional[str] = None) -> Article:
        """Write the article record, overwriting any previous version.

        ``thumbnail_url`` wins over the article's own value; the stored
        record always carries a ``thumbnailUrl`` (empty string when none).
        """
        stored = article.model_copy(update={
            "thumbnail_url": thumbnail_url if thumbnail_url is not None else (article.thumbnail_url or "")
        })
        await self.store.put(
            article_key(stored.id, stored.source.value),
            stored.to_json(),
            content_type="application/json",
            metadata={
                "source": stored.source.value,
                "crawled_at": stored.crawled_at.isoformat(),
            }
        )
        return stored

    async def find_by_id(self, article_id: str, source) -> Optional[Article]:
        """Get an article by ID. Missing or unreadable records yield ``None``."""
        stored = await self.store.get(article_key(article_id, _source_value(source)))
        if stored is None:
            return None
        try:
            return Article.model_validate_json(stored.text())
        except (PydanticValidationError, UnicodeDecodeError) as e:
            logger.error(f"Unreadable article record {article_id}: {e}")
            return None

    async def find_many(self, article_ids: List[str]) -> List[Article]:
        """Fetch several articles concurrently, preserving the order of ``article_ids``.

        Ids with an unknown prefix and records that are missing or corrupt are skipped.
        """
        lookups = []
        for article_id in article_ids:
            try:
                source = source_for_article_id(article_id)
            except ValueError:
                logger.warning(f"Skipping article with unknown id prefix: {article_id}")
                continue
            lookups.append(self.find_by_id(article_id, source))

        results = await asyncio.gather(*lookups)
        return [article for article in results if article is not None]

    async def save_variant(self, variant: ArticleVariant) -> None:
        """Persist a transformed variant; a later write for the same pair overwrites."""
        await self.store.put(
            variant_key(variant.article_id, variant.source.value, variant.variant.value),
            variant.to_json(),
            content_type="application/json",
            metadata={
                "source": variant.source.value,
                "variant": variant.variant.value,
                "model": variant.metadata.model,
            }
        )

    async def get_variant(self, article_id: str, source, variant) -> Optional[ArticleVariant]:
        """Get a stored variant, or ``None``."""
        stored = await self.store.get(
            variant_key(article_id, _source_value(source), _variant_value(variant))
        )
        if stored is None:
            return None
        try:
            return ArticleVariant.model_validate_json(stored.text())
        except (PydanticValidationError, UnicodeDecodeError) as e:
            logger.error(f"Unreadable variant record {article_id}/{_variant_value(variant)}: {e}")
            return None

    async def list_variants(self, article_id: str, source) -> List[str]:
        """List the names of the stored variants of an article."""
        prefix = variant_prefix(article_id, _source_value(source))
        names = []
        for key in await self.store.list(prefix):
            name = key[len(prefix):]
            if name.endswith(".json"):
                name = name[:-len(".json")]
            if name in _VARIANT_NAMES:
                names.append(name)
        return names

    async def save_thumbnail(self, article_id: str, data: bytes, content_type: str = "image/png") -> str:
        """Store image bytes and return the public path they are served from."""
        extension = THUMBNAIL_EXTENSIONS.get(content_type, "png")
        filename = f"{article_id}.{extension}"
        await self.store.put(
            f"thumbnails/{filename}",
            data,
            content_type=content_type,
            metadata={"article_id": article_id}
        )
        return f"/thumbnails/{filename}"

    async def get_thumbnail(self, filename: str) -> Optional[StoredObject]:
        return await self.store.get(f"thumbnails/{filename}")
