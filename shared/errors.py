"""Application exception hierarchy."""
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base application error carrying an HTTP status and a machine code."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail
        self.headers = headers or {}
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "status": self.status_code}
        if self.detail:
            body["message"] = self.detail
        body.update(self.extra)
        return body


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} with ID {resource_id} not found" if resource_id else f"{resource} not found"
        super().__init__(message, 404, "NOT_FOUND")


class ValidationError(AppError):
    """Invalid client input."""

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message, 400, "VALIDATION_ERROR", extra={"fields": fields} if fields else None)
        self.fields = fields or {}


class AuthenticationError(AppError):
    """Missing, malformed or wrong admin credentials."""

    def __init__(self, message: str, detail: str, status_code: int = 401):
        super().__init__(message, status_code, "AUTH_ERROR", detail=detail)


class RateLimitError(AppError):
    """Client exceeded its request budget for the current window."""

    def __init__(self, retry_after: int, limit: int, reset_at: int):
        super().__init__(
            "Rate limit exceeded",
            429,
            "RATE_LIMITED",
            detail=f"Too many requests. Please try again in {retry_after} seconds.",
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(reset_at),
            },
            extra={"retryAfter": retry_after}
        )


class ProviderError(AppError):
    """A news provider failed."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"Provider {provider}: {message}", 500, "PROVIDER_ERROR")
        self.provider = provider


class StorageError(AppError):
    """A blob store or key-value operation failed."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"Storage {operation}: {message}", 500, "STORAGE_ERROR")
        self.operation = operation


class ScrapeError(AppError):
    """An outbound page fetch failed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Fetch {url}: {message}", 502, "SCRAPE_ERROR")
        self.url = url


class TransformError(AppError):
    """The text-generation call could not produce a usable rewrite."""

    def __init__(self, message: str):
        super().__init__(message, 502, "TRANSFORM_ERROR")
