"""FastAPI dependencies: service lookup, admin auth and rate limiting."""
import hmac
import logging
from fastapi import Depends, Request, Response

from api.services.container import Services
from api.services.rate_limiter import RateLimitRule, admin_rule, transform_rule
from shared.errors import AuthenticationError, RateLimitError

logger = logging.getLogger(__name__)


def get_services(request: Request) -> Services:
    """Services built at startup and kept on the application state."""
    return request.app.state.services


def get_client_id(request: Request) -> str:
    """Best-effort client address from proxy headers."""
    headers = request.headers
    forwarded = headers.get("x-forwarded-for")
    return (
        headers.get("cf-connecting-ip")
        or (forwarded.split(",")[0].strip() if forwarded else None)
        or headers.get("x-real-ip")
        or "unknown"
    )


async def require_admin(request: Request, services: Services = Depends(get_services)) -> None:
    """Check ``Authorization: Bearer <ADMIN_API_KEY>``."""
    header = request.headers.get("authorization")
    if not header:
        raise AuthenticationError("Authentication required", "Missing Authorization header")

    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token:
        raise AuthenticationError("Invalid authentication", "Authorization header must use Bearer scheme")

    expected = services.settings.admin_api_key
    if not expected:
        logger.error("ADMIN_API_KEY not configured")
        raise AuthenticationError("Server configuration error", "Authentication system not configured", 500)

    if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        logger.warning(f"Failed authentication attempt from {get_client_id(request)}")
        raise AuthenticationError("Authentication failed", "Invalid API key", 403)

    logger.info(f"Authenticated request from {get_client_id(request)}")


async def _apply_rule(rule: RateLimitRule, request: Request, response: Response, services: Services):
    decision = await services.rate_limiter.hit(rule, get_client_id(request))
    if not decision.allowed:
        raise RateLimitError(decision.retry_after, decision.limit, decision.reset_at)
    response.headers.update(decision.headers())


async def admin_rate_limit(request: Request, response: Response, services: Services = Depends(get_services)):
    await _apply_rule(admin_rule(services.settings), request, response, services)


async def transform_rate_limit(request: Request, response: Response, services: Services = Depends(get_services)):
    await _apply_rule(transform_rule(services.settings), request, response, services)
