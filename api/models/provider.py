"""Provider configuration and crawl result models."""
from typing import List
from pydantic import BaseModel, Field

from .article import Article, Language


class ProviderConfig(BaseModel):
    """Static description of a news provider."""
    id: str
    name: str
    enabled: bool = True
    language: Language
    default_limit: int = Field(default=10, ge=1)
    fetch_full_content: bool = False


class ProviderResult(BaseModel):
    """Outcome of crawling a single provider."""
    provider_id: str
    articles: List[Article] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> dict:
        """Compact form used in admin responses."""
        return {
            "providerId": self.provider_id,
            "count": len(self.articles),
            "errors": self.errors,
            "durationMs": self.duration_ms,
        }
