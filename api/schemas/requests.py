"""Request schemas for API endpoints."""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from api.models.article import NewsSource, PromptStyle, TransformVariant


class CrawlRequest(BaseModel):
    """Request schema for a manual crawl."""
    sources: List[NewsSource] = Field(
        default_factory=lambda: [NewsSource.HACKERNEWS],
        min_length=1,
        description="Provider ids to crawl"
    )
    count: int = Field(default=5, ge=1, le=20, description="Articles per provider")
    sync: bool = Field(default=True, description="Wait for the pipeline to finish")

    @field_validator("sources")
    @classmethod
    def validate_unique_sources(cls, v: List[NewsSource]) -> List[NewsSource]:
        """Drop repeated sources, keeping the first occurrence."""
        return list(dict.fromkeys(v))


class TransformRequest(BaseModel):
    """Request schema for admin transforms.

    Exactly one target: ``articleId``, ``articleIds`` or ``source``.
    """
    article_id: Optional[str] = Field(default=None, alias="articleId", min_length=1, max_length=100)
    article_ids: Optional[List[str]] = Field(default=None, alias="articleIds", min_length=1, max_length=50)
    source: Optional[NewsSource] = None
    limit: int = Field(default=10, ge=1, le=50)
    variant: Optional[TransformVariant] = None
    variants: Optional[List[TransformVariant]] = None
    style: Optional[PromptStyle] = None

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def validate_target(self) -> "TransformRequest":
        targets = [t for t in (self.article_id, self.article_ids, self.source) if t is not None]
        if len(targets) != 1:
            raise ValueError("Provide exactly one of articleId, articleIds or source")
        if TransformVariant.RAW in self.requested_variants():
            raise ValueError("The raw variant cannot be transformed")
        return self

    def requested_variants(self) -> List[TransformVariant]:
        if self.variants:
            return list(dict.fromkeys(self.variants))
        return [self.variant or TransformVariant.DEFAULT]


class PushTestRequest(BaseModel):
    """Request schema for a test notification."""
    title: str = Field(default="Test Notification", max_length=100)
    message: str = Field(default="This is a test push notification.", max_length=500)
