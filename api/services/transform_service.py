"""Transform service: named variants of an article, generated once and cached."""
import logging
from typing import List, Optional

from api.models.article import Article, ArticleVariant, TransformVariant, VariantMetadata
from crawler.transformer import ContentTransformer
from database.repositories.article_repo import ArticleRepository
from shared.config import Settings, settings as default_settings
from shared.errors import ValidationError

logger = logging.getLogger(__name__)

VARIANT_PROMPTS = {
    TransformVariant.DEFAULT: (
        "Transform this article into an engaging, informative summary suitable for general readers. "
        "Maintain the core message while making it accessible."
    ),
    TransformVariant.TECHNICAL: (
        "Transform this into a technical deep-dive. Focus on implementation details, technical concepts, "
        "and insights for experts in the field."
    ),
    TransformVariant.CASUAL: (
        "Rewrite this in a friendly, conversational tone. Make it fun and easy to read, "
        "like explaining to a friend over coffee."
    ),
    TransformVariant.FORMAL: (
        "Present this information in a professional, formal manner suitable for business or academic contexts."
    ),
    TransformVariant.BRIEF: (
        "Create an ultra-concise summary. Capture only the most essential points in 2-3 sentences maximum."
    ),
}


class TransformService:
    """Creates, caches and lists article variants."""

    def __init__(
        self,
        article_repo: ArticleRepository,
        transformer: Optional[ContentTransformer] = None,
        settings: Optional[Settings] = None
    ):
        self.article_repo = article_repo
        self.settings = settings or default_settings
        self.transformer = transformer or ContentTransformer(self.settings)

    async def transform_article(
        self,
        article: Article,
        variant: TransformVariant,
        style: Optional[str] = None
    ) -> ArticleVariant:
        """Run the transform step for ``variant`` and store the result."""
        variant = TransformVariant(variant)
        if variant == TransformVariant.RAW:
            raise ValidationError("The raw variant is not transformed")

        logger.info(f"Transforming {article.id} with variant {variant.value}, style {style or 'default'}")
        outcome = await self.transformer.transform(article, custom_prompt=VARIANT_PROMPTS[variant], style=style)
        transformed = outcome.article

        result = ArticleVariant(
            article_id=article.id,
            source=article.source,
            variant=variant,
            title=transformed.transformed_title or article.original_title,
            content=transformed.transformed_content or article.original_content,
            thumbnail_url=article.thumbnail_url,
            tags=transformed.tags,
            metadata=VariantMetadata(
                variant=variant,
                model=self.settings.research_model if outcome.applied else "none",
                prompt_style=style or self.settings.prompt_style,
            ),
        )
        await self.article_repo.save_variant(result)
        logger.info(f"Saved variant {variant.value} for {article.id}")
        return result

    async def transform_multiple_variants(
        self,
        article: Article,
        variants: List[TransformVariant],
        style: Optional[str] = None
    ) -> List[ArticleVariant]:
        """Create several variants in turn; one failing variant does not stop the rest."""
        results = []
        for variant in variants:
            try:
                results.append(await self.transform_article(article, variant, style))
            except Exception as e:
                logger.error(f"Error transforming {article.id} with variant {variant}: {e}")
        return results

    async def get_or_create_variant(self, article: Article, variant: TransformVariant) -> ArticleVariant:
        """Return the variant, creating and caching it on first request."""
        variant = TransformVariant(variant)
        if variant == TransformVariant.RAW:
            return ArticleVariant.raw_from(article)

        existing = await self.article_repo.get_variant(article.id, article.source, variant)
        if existing is not None:
            logger.info(f"Using cached variant {variant.value} for {article.id}")
            return existing

        logger.info(f"Creating new variant {variant.value} for {article.id}")
        return await self.transform_article(article, variant)

    async def list_available_variants(self, article_id: str, source) -> List[str]:
        stored = await self.article_repo.list_variants(article_id, source)
        return [TransformVariant.RAW.value] + [v for v in stored if v != TransformVariant.RAW.value]
