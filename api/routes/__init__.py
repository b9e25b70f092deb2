# Routes module
from .admin import router as admin_router
from .articles import router as articles_router
from .assets import router as assets_router
from .subscriptions import router as subscriptions_router

__all__ = [
    "admin_router",
    "articles_router",
    "assets_router",
    "subscriptions_router",
]
