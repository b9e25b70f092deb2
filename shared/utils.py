"""Shared utility functions."""
import re
import uuid
import hashlib
import html
from datetime import datetime, timezone
from typing import Optional

_ARTICLE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def generate_opaque_id() -> str:
    """Generate a short random id suffix for sources without stable ids."""
    return uuid.uuid4().hex[:12]


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO format string."""
    if dt is None:
        return None
    return dt.isoformat()


def from_unix_timestamp(value: Optional[float]) -> Optional[datetime]:
    """Convert a unix timestamp (seconds) to an aware UTC datetime."""
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def sanitize_article_id(article_id: str) -> Optional[str]:
    """Return the id if it is safe to embed in a storage key, else ``None``."""
    if not article_id or len(article_id) > 100:
        return None
    if not _ARTICLE_ID_RE.match(article_id):
        return None
    return article_id


def endpoint_hash(endpoint: str) -> str:
    """Generate a stable key for a push endpoint."""
    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()[:32]


def string_hash(value: str) -> int:
    """32-bit signed string hash, stable across processes.

    Used to pick deterministic placeholder images for an article id.
    """
    result = 0
    for char in value:
        result = (result << 5) - result + ord(char)
        result &= 0xFFFFFFFF
    if result & 0x80000000:
        result -= 0x100000000
    return result


def clean_html_text(text: str) -> str:
    """Strip tags, decode entities and collapse whitespace."""
    text = _TAG_RE.sub(" ", text or "")
    text = html.unescape(text)
    return _WHITESPACE_RE.sub(" ", text).strip()

