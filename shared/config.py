"""Shared configuration for all services."""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Redis Configuration (index, subscriptions, rate limits)
    redis_url: str = "redis://localhost:6379"

    # MongoDB Configuration (blob store)
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "news_pipeline"
    mongo_blob_collection: str = "blobs"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    environment: str = "production"
    public_base_url: str = ""

    # Security
    admin_api_key: Optional[str] = None

    # Text generation
    openrouter_api_key: Optional[str] = None
    openrouter_url: str = "https://openrouter.ai/api/v1/chat/completions"
    research_model: str = "openai/gpt-4o-mini"
    prompt_style: str = "random"

    # Image generation
    gemini_api_key: Optional[str] = None
    gemini_image_model: str = "gemini-2.5-flash-image"
    enable_ai_images: bool = False
    unsplash_api_key: Optional[str] = None

    # News source credentials
    reddit_client_id: Optional[str] = None
    reddit_client_secret: Optional[str] = None
    scrapedo_api_key: Optional[str] = None
    serper_api_key: Optional[str] = None

    # Push notifications
    vapid_subject: Optional[str] = None
    vapid_private_key: Optional[str] = None
    vapid_public_key: Optional[str] = None
    push_ttl: int = 60

    # Index configuration
    max_articles_per_source: int = 100
    max_articles_global: int = 200
    index_ttl: int = 60 * 60 * 24 * 7
    default_article_limit: int = 20

    # Crawl configuration
    default_crawl_limit: int = 5
    fetch_timeout: int = 15
    max_content_length: int = 2000
    batch_size: int = 5
    batch_delay: float = 1.0

    # Rate Limiting
    rate_limit_admin_requests: int = 10
    rate_limit_transform_requests: int = 5
    rate_limit_window: int = 60  # seconds

    # Scheduler Configuration
    # empty: crawl every enabled provider
    scheduled_sources: List[str] = ["hackernews", "t24", "eksisozluk"]
    scheduled_limit: int = 1
    crawl_interval_seconds: int = 60 * 60 * 4

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def has_feature(self, feature: str) -> bool:
        """Report whether the credential gating ``feature`` is configured."""
        if feature == "ai-transformation":
            return bool(self.openrouter_api_key)
        if feature == "image-generation":
            return bool(self.gemini_api_key)
        if feature == "stock-photos":
            return bool(self.unsplash_api_key)
        if feature == "reddit":
            return bool(self.reddit_client_id and self.reddit_client_secret)
        if feature == "scraping":
            return bool(self.scrapedo_api_key)
        if feature == "search":
            return bool(self.serper_api_key)
        if feature == "push":
            return bool(self.vapid_private_key and self.vapid_subject)
        return False


settings = Settings()
