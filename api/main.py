"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from database.connection import DatabaseConnection
from api.routes import admin_router, articles_router, assets_router, subscriptions_router
from api.schemas.responses import HealthResponse
from api.services.container import build_services
from shared.config import settings
from shared.errors import AppError
from shared.utils import format_datetime, get_utc_now

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    await DatabaseConnection.init_mongo()
    redis_client = await DatabaseConnection.init_redis()
    blob_collection = await DatabaseConnection.get_blob_collection()

    app.state.services = build_services(redis_client, blob_collection, settings)
    logger.info(f"Registered providers: {app.state.services.registry.list_provider_ids()}")

    yield

    # Shutdown
    await DatabaseConnection.close_connections()


# Create FastAPI app
app = FastAPI(
    title="News Aggregation Pipeline",
    description="Crawls news providers, rewrites and illustrates articles, and serves them over REST",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Known application errors carry their own status and body.

    Server-side failures keep their detail in the log and answer with the
    same generic body as unhandled errors.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        content = {"error": "Internal server error"}
        if settings.is_development:
            content["message"] = exc.message
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"path": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {"error": "Internal server error"}
    if settings.is_development:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include routers
app.include_router(articles_router)
app.include_router(admin_router)
app.include_router(subscriptions_router)
app.include_router(assets_router)


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", timestamp=format_datetime(get_utc_now()))


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "News Aggregation Pipeline",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "articles": "/api/articles",
            "admin": "/api/admin",
            "subscriptions": "/api/subscriptions",
            "thumbnails": "/thumbnails/{filename}"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug
    )
