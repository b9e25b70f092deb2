# Models module
from .article import (
    Article,
    ArticleVariant,
    Language,
    NewsSource,
    PREFIX_SOURCES,
    PromptStyle,
    SOURCE_PREFIXES,
    TransformVariant,
    VariantMetadata,
    build_article_id,
    source_for_article_id,
)
from .provider import ProviderConfig, ProviderResult
from .subscription import PushSubscription, SubscriptionKeys

__all__ = [
    "Article",
    "ArticleVariant",
    "Language",
    "NewsSource",
    "PREFIX_SOURCES",
    "PromptStyle",
    "SOURCE_PREFIXES",
    "TransformVariant",
    "VariantMetadata",
    "build_article_id",
    "source_for_article_id",
    "ProviderConfig",
    "ProviderResult",
    "PushSubscription",
    "SubscriptionKeys",
]
