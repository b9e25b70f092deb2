"""Response schemas for API endpoints."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ArticleListResponse(BaseModel):
    """Response schema for article listings."""
    articles: List[Dict[str, Any]] = Field(default_factory=list, description="Articles, newest first")
    count: int = Field(..., description="Number of articles returned")


class VariantListResponse(BaseModel):
    """Response schema for the variants of an article."""
    articleId: str = Field(..., description="Article identifier")
    variants: List[str] = Field(..., description="Available variant names, raw first")
    count: int


class CrawlCompletedResponse(BaseModel):
    """Response schema for a synchronous crawl."""
    success: bool = True
    count: int = Field(..., description="Number of articles processed")
    status: str = "completed"
    articles: List[Dict[str, Any]] = Field(default_factory=list)
    results: List[Dict[str, Any]] = Field(default_factory=list, description="Per-provider summaries")


class CrawlAcceptedResponse(BaseModel):
    """Response schema for a background crawl."""
    success: bool = True
    status: str = "processing"
    message: str


class TransformResponse(BaseModel):
    """Response schema for admin transforms."""
    success: bool = True
    count: int
    variants: List[Dict[str, Any]] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list, description="Requested ids that were not found")


class CleanResponse(BaseModel):
    success: bool = True
    message: str
    deletedKeys: List[str] = Field(default_factory=list)


class ProvidersResponse(BaseModel):
    all: List[str]
    enabled: List[str]


class SuccessResponse(BaseModel):
    success: bool = True


class CountResponse(BaseModel):
    count: int


class PushTestResponse(BaseModel):
    """Response schema for a test notification."""
    success: bool = True
    sent: int
    failed: int
    errors: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Error message")
    message: Optional[str] = Field(None, description="Detailed error information")
