# Schemas module
from .requests import CrawlRequest, PushTestRequest, TransformRequest
from .responses import (
    ArticleListResponse,
    CleanResponse,
    CountResponse,
    CrawlAcceptedResponse,
    CrawlCompletedResponse,
    ErrorResponse,
    HealthResponse,
    ProvidersResponse,
    PushTestResponse,
    SuccessResponse,
    TransformResponse,
    VariantListResponse,
)

__all__ = [
    "CrawlRequest",
    "PushTestRequest",
    "TransformRequest",
    "ArticleListResponse",
    "CleanResponse",
    "CountResponse",
    "CrawlAcceptedResponse",
    "CrawlCompletedResponse",
    "ErrorResponse",
    "HealthResponse",
    "ProvidersResponse",
    "PushTestResponse",
    "SuccessResponse",
    "TransformResponse",
    "VariantListResponse",
]
