"""Article model definitions."""
from enum import Enum
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from shared.utils import get_utc_now


class NewsSource(str, Enum):
    """News source enumeration."""
    HACKERNEWS = "hackernews"
    T24 = "t24"
    EKSISOZLUK = "eksisozluk"
    REDDIT = "reddit"
    WIKIPEDIA = "wikipedia"
    WEBRAZZI = "webrazzi"
    BBC = "bbc"


class Language(str, Enum):
    """Article language enumeration."""
    TR = "tr"
    EN = "en"


class TransformVariant(str, Enum):
    """Named renderings of an article's text."""
    RAW = "raw"
    DEFAULT = "default"
    TECHNICAL = "technical"
    CASUAL = "casual"
    FORMAL = "formal"
    BRIEF = "brief"


class PromptStyle(str, Enum):
    """Writing styles available to the transform step."""
    PAMUK = "pamuk"
    DIRECT = "direct"
    GREENTEXT = "greentext"
    RANDOM = "random"


# Article id prefix for each source. Ids are "<prefix>-<opaque>".
SOURCE_PREFIXES: Dict[NewsSource, str] = {
    NewsSource.HACKERNEWS: "hn",
    NewsSource.WIKIPEDIA: "wiki",
    NewsSource.T24: "t24",
    NewsSource.EKSISOZLUK: "eksisozluk",
    NewsSource.REDDIT: "reddit",
    NewsSource.WEBRAZZI: "webrazzi",
    NewsSource.BBC: "bbc",
}

PREFIX_SOURCES: Dict[str, NewsSource] = {prefix: source for source, prefix in SOURCE_PREFIXES.items()}


def build_article_id(source: NewsSource, opaque: str) -> str:
    """Build an article id for ``source`` from a source-specific suffix."""
    return f"{SOURCE_PREFIXES[NewsSource(source)]}-{opaque}"


def source_for_article_id(article_id: str) -> NewsSource:
    """Resolve the source owning ``article_id``.

    Raises ``ValueError`` when the id has no suffix or an unknown prefix.
    """
    prefix, sep, opaque = article_id.partition("-")
    if not sep or not opaque:
        raise ValueError(f"Malformed article id: {article_id!r}")
    try:
        return PREFIX_SOURCES[prefix]
    except KeyError:
        raise ValueError(f"Unknown article id prefix: {prefix!r}") from None


class Article(BaseModel):
    """Raw crawl result for a single news item."""
    id: str
    source: NewsSource
    original_title: str = Field(alias="originalTitle")
    original_content: str = Field(default="", alias="originalContent")
    original_url: str = Field(alias="originalUrl")
    language: Language
    crawled_at: datetime = Field(default_factory=get_utc_now, alias="crawledAt")
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")
    tags: List[str] = Field(default_factory=list)
    transformed_title: Optional[str] = Field(default=None, alias="transformedTitle")
    transformed_content: Optional[str] = Field(default=None, alias="transformedContent")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def check_id_matches_source(self) -> "Article":
        """Reject ids whose prefix does not belong to ``source``."""
        if source_for_article_id(self.id) != self.source:
            raise ValueError(f"Article id {self.id!r} does not belong to source {self.source.value!r}")
        return self

    @property
    def display_title(self) -> str:
        return self.transformed_title or self.original_title

    @property
    def display_content(self) -> str:
        return self.transformed_content or self.original_content

    def to_json(self) -> str:
        """Serialize with the camelCase field names used in storage and the API."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VariantMetadata(BaseModel):
    """Provenance of a transformed variant."""
    variant: TransformVariant
    model: str
    prompt_style: Optional[str] = Field(default=None, alias="promptStyle")
    transformed_at: datetime = Field(default_factory=get_utc_now, alias="transformedAt")

    class Config:
        populate_by_name = True


class ArticleVariant(BaseModel):
    """One transformed rendering of an article."""
    article_id: str = Field(alias="articleId")
    source: NewsSource
    variant: TransformVariant
    title: str
    content: str
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")
    tags: Optional[List[str]] = None
    metadata: VariantMetadata

    class Config:
        populate_by_name = True

    @classmethod
    def raw_from(cls, article: Article) -> "ArticleVariant":
        """Synthesize the untransformed variant straight from the article."""
        return cls(
            article_id=article.id,
            source=article.source,
            variant=TransformVariant.RAW,
            title=article.original_title,
            content=article.original_content,
            thumbnail_url=article.thumbnail_url,
            tags=article.tags,
            metadata=VariantMetadata(
                variant=TransformVariant.RAW,
                model="none",
                transformed_at=article.crawled_at,
            ),
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
