"""Admin routes: manual crawl, transforms, index cleanup and provider listing."""
import logging
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends

from api.dependencies import admin_rate_limit, get_services, require_admin, transform_rate_limit
from api.models.article import Article, source_for_article_id
from api.schemas.requests import CrawlRequest, TransformRequest
from api.schemas.responses import (
    CleanResponse,
    CrawlAcceptedResponse,
    CrawlCompletedResponse,
    ProvidersResponse,
    TransformResponse,
)
from api.services.container import Services
from shared.utils import sanitize_article_id

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


async def _run_pipeline(services: Services, sources: List[str], count: int):
    try:
        run = await services.worker.run(sources, count)
        logger.info(f"Background crawl finished: {len(run.processed)} articles processed")
    except Exception as e:
        logger.error(f"Background crawl failed: {e}")


@router.post("/crawl", dependencies=[Depends(admin_rate_limit)])
async def crawl(
    request: CrawlRequest,
    background_tasks: BackgroundTasks,
    services: Services = Depends(get_services)
):
    """
    Trigger a crawl.

    - Crawls the requested providers in parallel
    - Saves, transforms and illustrates every article
    - Notifies push subscribers about the new batch
    """
    sources = [s.value for s in request.sources]

    if not request.sync:
        background_tasks.add_task(_run_pipeline, services, sources, request.count)
        return CrawlAcceptedResponse(message=f"Crawling {len(sources)} sources in background")

    run = await services.worker.run(sources, request.count)
    return CrawlCompletedResponse(
        count=len(run.processed),
        articles=[a.to_dict() for a in run.processed],
        results=[r.summary() for r in run.results],
    )


async def _resolve_targets(request: TransformRequest, services: Services):
    """Return ``(articles, missing_ids)`` for a transform request."""
    if request.source is not None:
        articles = await services.article_service.list_articles(request.source, request.limit)
        return articles, []

    ids = [request.article_id] if request.article_id else list(request.article_ids)
    articles: List[Article] = []
    missing: List[str] = []
    for article_id in ids:
        article = None
        if sanitize_article_id(article_id) is not None:
            try:
                article = await services.article_service.get_article(
                    article_id, source_for_article_id(article_id)
                )
            except ValueError:
                article = None
        if article is None:
            missing.append(article_id)
        else:
            articles.append(article)
    return articles, missing


@router.post("/transform", response_model=TransformResponse, dependencies=[Depends(transform_rate_limit)])
async def transform(request: TransformRequest, services: Services = Depends(get_services)):
    """Create (or regenerate) variants for one article, a list of ids, or a source."""
    articles, missing = await _resolve_targets(request, services)
    variants = request.requested_variants()
    style = request.style.value if request.style else None

    results = []
    for article in articles:
        results.extend(await services.transform_service.transform_multiple_variants(article, variants, style))

    return TransformResponse(count=len(results), variants=[v.to_dict() for v in results], missing=missing)


@router.post("/clean", response_model=CleanResponse)
async def clean(services: Services = Depends(get_services)):
    """Delete the recency indexes. Stored articles are kept."""
    deleted = await services.index_repo.clear_all()
    return CleanResponse(message="Index store cleaned successfully", deletedKeys=deleted)


@router.get("/providers", response_model=ProvidersResponse)
async def providers(services: Services = Depends(get_services)):
    """List registered and runnable providers."""
    return ProvidersResponse(
        all=services.registry.list_provider_ids(),
        enabled=[p.id for p in services.registry.get_enabled()],
    )
