"""Tests for article, subscription and provider models."""
import pytest
from pydantic import ValidationError

from api.models.article import (
    Article,
    ArticleVariant,
    Language,
    NewsSource,
    TransformVariant,
    build_article_id,
    source_for_article_id,
)
from api.models.provider import ProviderResult
from api.models.subscription import PushSubscription


class TestArticleIds:
    """Tests for id prefix handling."""

    def test_build_article_id_uses_source_prefix(self):
        assert build_article_id(NewsSource.HACKERNEWS, "123") == "hn-123"
        assert build_article_id(NewsSource.WIKIPEDIA, "tfa-x") == "wiki-tfa-x"
        assert build_article_id(NewsSource.T24, "abc") == "t24-abc"

    def test_source_for_article_id(self):
        assert source_for_article_id("hn-123") == NewsSource.HACKERNEWS
        assert source_for_article_id("wiki-news-abc") == NewsSource.WIKIPEDIA
        assert source_for_article_id("eksisozluk-abc") == NewsSource.EKSISOZLUK

    @pytest.mark.parametrize("article_id", ["hn", "hn-", "xyz-123", "hackernews-1"])
    def test_source_for_malformed_id_raises(self, article_id):
        with pytest.raises(ValueError):
            source_for_article_id(article_id)


class TestArticle:
    """Tests for the Article model."""

    def test_id_must_match_source(self):
        with pytest.raises(ValidationError):
            Article(
                id="hn-1",
                source=NewsSource.REDDIT,
                original_title="Title",
                original_url="https://example.com",
                language=Language.EN,
            )

    def test_to_dict_uses_camel_case_and_skips_none(self, sample_article):
        data = sample_article.to_dict()

        assert data["originalTitle"] == sample_article.original_title
        assert data["originalUrl"] == "https://example.com/tiny-db"
        assert data["source"] == "hackernews"
        assert "transformedTitle" not in data
        assert "thumbnailUrl" not in data

    def test_json_round_trip_by_alias(self, sample_article):
        restored = Article.model_validate_json(sample_article.to_json())
        assert restored == sample_article

    def test_display_fields_prefer_transformed(self, sample_article):
        assert sample_article.display_title == sample_article.original_title

        transformed = sample_article.model_copy(update={"transformed_title": "Rewritten"})
        assert transformed.display_title == "Rewritten"
        assert transformed.display_content == sample_article.original_content


class TestArticleVariant:
    """Tests for variant synthesis."""

    def test_raw_from_copies_original_fields(self, sample_article):
        variant = ArticleVariant.raw_from(sample_article)

        assert variant.variant == TransformVariant.RAW
        assert variant.title == sample_article.original_title
        assert variant.content == sample_article.original_content
        assert variant.metadata.model == "none"
        assert variant.metadata.transformed_at == sample_article.crawled_at
        assert variant.to_dict()["articleId"] == "hn-41000001"


class TestPushSubscription:
    """Tests for subscription validation."""

    def test_valid_subscription(self, sample_subscription_payload):
        subscription = PushSubscription.model_validate(sample_subscription_payload)

        info = subscription.to_subscription_info()
        assert info["endpoint"] == sample_subscription_payload["endpoint"]
        assert info["keys"]["auth"] == sample_subscription_payload["keys"]["auth"]

    def test_http_endpoint_rejected(self, sample_subscription_payload):
        sample_subscription_payload["endpoint"] = "http://push.example.com/send/abc"
        with pytest.raises(ValidationError):
            PushSubscription.model_validate(sample_subscription_payload)

    def test_non_base64url_key_rejected(self, sample_subscription_payload):
        sample_subscription_payload["keys"]["auth"] = "not base64!"
        with pytest.raises(ValidationError):
            PushSubscription.model_validate(sample_subscription_payload)


class TestProviderResult:

    def test_summary(self, sample_article):
        result = ProviderResult(provider_id="hackernews", articles=[sample_article], duration_ms=12)

        assert result.ok
        assert result.summary() == {
            "providerId": "hackernews",
            "count": 1,
            "errors": [],
            "durationMs": 12,
        }
