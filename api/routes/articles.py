"""Article routes for the public REST API."""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_services
from api.models.article import Article, NewsSource, TransformVariant, source_for_article_id
from api.schemas.responses import ArticleListResponse, ErrorResponse, VariantListResponse
from api.services.container import Services
from shared.errors import NotFoundError, ValidationError
from shared.utils import sanitize_article_id


router = APIRouter(prefix="/api/articles", tags=["articles"])


async def _load_article(article_id: str, services: Services) -> Article:
    """Resolve an id from the path to a stored article or raise 400/404."""
    if sanitize_article_id(article_id) is None:
        raise ValidationError("Invalid article ID")
    try:
        source = source_for_article_id(article_id)
    except ValueError as e:
        raise ValidationError(str(e))

    article = await services.article_service.get_article(article_id, source)
    if article is None:
        raise NotFoundError("Article", article_id)
    return article


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    source: Optional[NewsSource] = None,
    limit: int = Query(default=20, ge=1, le=100),
    services: Services = Depends(get_services)
):
    """List the newest articles, optionally for one source."""
    articles = await services.article_service.list_articles(source, limit)
    return ArticleListResponse(articles=[a.to_dict() for a in articles], count=len(articles))


@router.get("/{article_id}", responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def get_article(
    article_id: str,
    variant: Optional[TransformVariant] = None,
    services: Services = Depends(get_services)
):
    """
    Get a single article.

    With ``variant`` the named rendering is returned instead, generated on
    first request and cached afterwards.
    """
    article = await _load_article(article_id, services)
    if variant is None:
        return article.to_dict()

    result = await services.transform_service.get_or_create_variant(article, variant)
    return result.to_dict()


@router.get(
    "/{article_id}/variants",
    response_model=VariantListResponse,
    responses={404: {"model": ErrorResponse}}
)
async def list_variants(article_id: str, services: Services = Depends(get_services)):
    """List the variants available for an article."""
    article = await _load_article(article_id, services)
    variants = await services.transform_service.list_available_variants(article.id, article.source)
    return VariantListResponse(articleId=article.id, variants=variants, count=len(variants))
