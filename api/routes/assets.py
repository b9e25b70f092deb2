"""Static asset routes: stored thumbnails."""
import re
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.dependencies import get_services
from api.services.container import Services
from shared.errors import NotFoundError, ValidationError


router = APIRouter(tags=["assets"])

_FILENAME_RE = re.compile(r"^[A-Za-z0-9_-]{1,100}\.(png|jpg|webp)$")


@router.get("/thumbnails/{filename}")
async def get_thumbnail(filename: str, services: Services = Depends(get_services)):
    """Serve a generated thumbnail from the blob store."""
    if not _FILENAME_RE.match(filename):
        raise ValidationError("Invalid thumbnail name")

    stored = await services.article_repo.get_thumbnail(filename)
    if stored is None:
        raise NotFoundError("Thumbnail", filename)

    return Response(
        content=stored.body,
        media_type=stored.content_type,
        headers={"Cache-Control": "public, max-age=31536000"}
    )
