"""Tests for variant creation and caching."""
import pytest

from api.models.article import TransformVariant
from api.services.transform_service import VARIANT_PROMPTS, TransformService
from crawler.transformer import TransformOutcome, untransformed
from shared.errors import ValidationError


def applied_outcome(article, title="Rewritten", content="Rewritten body"):
    transformed = article.model_copy(update={
        "transformed_title": title,
        "transformed_content": content,
        "tags": ["tech"],
    })
    return TransformOutcome(transformed, True, None, "custom")


class TestTransformService:
    """Tests for TransformService."""

    @pytest.mark.asyncio
    async def test_raw_variant_never_calls_model(self, article_repo, mock_transformer, settings, sample_article):
        service = TransformService(article_repo, mock_transformer, settings)

        variant = await service.get_or_create_variant(sample_article, TransformVariant.RAW)

        mock_transformer.transform.assert_not_called()
        assert variant.variant == TransformVariant.RAW
        assert variant.title == sample_article.original_title
        assert variant.metadata.model == "none"

    @pytest.mark.asyncio
    async def test_transform_raw_rejected(self, article_repo, mock_transformer, settings, sample_article):
        service = TransformService(article_repo, mock_transformer, settings)

        with pytest.raises(ValidationError):
            await service.transform_article(sample_article, TransformVariant.RAW)

    @pytest.mark.asyncio
    async def test_variant_is_cached(self, article_repo, mock_transformer, settings, sample_article):
        mock_transformer.transform.return_value = applied_outcome(sample_article)
        service = TransformService(article_repo, mock_transformer, settings)

        first = await service.get_or_create_variant(sample_article, TransformVariant.TECHNICAL)
        second = await service.get_or_create_variant(sample_article, "technical")

        assert mock_transformer.transform.await_count == 1
        assert first.title == second.title == "Rewritten"
        assert second.metadata.model == settings.research_model

    @pytest.mark.asyncio
    async def test_variant_instruction_is_passed(self, article_repo, mock_transformer, settings, sample_article):
        mock_transformer.transform.return_value = applied_outcome(sample_article)
        service = TransformService(article_repo, mock_transformer, settings)

        await service.transform_article(sample_article, TransformVariant.BRIEF, style="pamuk")

        kwargs = mock_transformer.transform.call_args.kwargs
        assert kwargs["custom_prompt"] == VARIANT_PROMPTS[TransformVariant.BRIEF]
        assert kwargs["style"] == "pamuk"

    @pytest.mark.asyncio
    async def test_unapplied_transform_records_no_model(self, article_repo, mock_transformer, settings, sample_article):
        mock_transformer.transform.return_value = TransformOutcome(
            untransformed(sample_article), False, "no text-generation credential"
        )
        service = TransformService(article_repo, mock_transformer, settings)

        variant = await service.transform_article(sample_article, TransformVariant.CASUAL)

        assert variant.metadata.model == "none"
        assert variant.metadata.prompt_style == settings.prompt_style
        assert variant.title == sample_article.original_title

    @pytest.mark.asyncio
    async def test_multiple_variants_and_listing(self, article_repo, mock_transformer, settings, sample_article):
        mock_transformer.transform.return_value = applied_outcome(sample_article)
        service = TransformService(article_repo, mock_transformer, settings)

        results = await service.transform_multiple_variants(
            sample_article, [TransformVariant.FORMAL, TransformVariant.RAW, TransformVariant.BRIEF]
        )

        # raw fails on its own without stopping the others
        assert [r.variant for r in results] == [TransformVariant.FORMAL, TransformVariant.BRIEF]
        assert await service.list_available_variants(sample_article.id, sample_article.source) == [
            "raw", "brief", "formal"
        ]
