"""AI thumbnail generation through the Gemini image model."""
import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Optional
import aiohttp

from api.models.article import Article
from shared.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

GEMINI_API = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_THEME = "abstract concepts and ideas"

# Declaration order matters: ties go to the earlier theme.
THEMES = [
    ("technology and innovation", ["ai", "tech", "software", "computer", "digital", "innovation", "startup", "code"]),
    ("business and economy", ["business", "market", "economy", "finance", "trade", "company", "investment"]),
    ("science and discovery", ["science", "research", "study", "discovery", "space", "climate", "nature"]),
    ("culture and society", ["culture", "art", "music", "film", "book", "society", "people", "community"]),
    ("politics and governance", ["government", "politics", "election", "policy", "law", "democracy"]),
    ("global events", ["world", "international", "global", "country", "nation", "war", "peace"]),
    ("urban life and cities", ["city", "urban", "architecture", "building", "street", "neighborhood"]),
    ("knowledge and learning", ["education", "learning", "university", "school", "knowledge", "wisdom"]),
]

IMAGE_PROMPT = """Create a premium, editorial-style illustration for a news article titled: "{title}".

Style Guide:
- Aesthetic: magazine cover style.
- Visuals: Abstract, minimalist figures (NO realistic faces, NO facial features). Use silhouettes or soft shapes to represent people.
- Composition: Clean, spacious, using negative space effectively.
- Color Palette: Sophisticated, muted tones with one vibrant accent color.
- Texture: Soft gradients, smooth vector-like shapes with subtle grain.
- Elements: Use symbolic metaphors related to "{theme}".

Strict Constraints:
- NO TEXT.
- NO LOGOS.
- NO REALISTIC PHOTO ELEMENTS.
- Figures must be faceless and stylized."""


@dataclass
class ThumbnailImage:
    """Decoded image bytes returned by the image model."""
    data: bytes
    content_type: str


def extract_theme(title: str, content: str) -> str:
    """Pick the theme whose keywords appear most often as substrings of the text."""
    text = f"{title} {content}".lower()
    best_theme = DEFAULT_THEME
    best_score = 0
    for theme, keywords in THEMES:
        score = sum(1 for keyword in keywords if keyword in text)
        if score > best_score:
            best_theme, best_score = theme, score
    return best_theme


class ThumbnailGenerator:
    """Generates article illustrations. Returns ``None`` instead of raising."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def build_prompt(self, article: Article) -> str:
        title = article.display_title
        content = (article.display_content or "")[:500]
        return IMAGE_PROMPT.format(title=title, theme=extract_theme(title, content))

    async def generate(self, article: Article) -> Optional[ThumbnailImage]:
        if not self.settings.has_feature("image-generation"):
            logger.warning(f"GEMINI_API_KEY missing, no thumbnail for {article.id}")
            return None

        started = time.monotonic()
        try:
            data = await self._request(self.build_prompt(article))
            image = self._parse_response(data)
        except Exception as e:
            logger.error(f"Thumbnail generation failed for {article.id}: {e}")
            return None

        elapsed = int((time.monotonic() - started) * 1000)
        if image is None:
            logger.warning(f"No image data returned for {article.id} after {elapsed}ms")
        else:
            logger.info(f"Generated thumbnail for {article.id}: {len(image.data)} bytes, {image.content_type}, {elapsed}ms")
        return image

    async def _request(self, prompt: str) -> Optional[dict]:
        url = f"{GEMINI_API}/{self.settings.gemini_image_model}:generateContent?key={self.settings.gemini_api_key}"
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=max(self.settings.fetch_timeout, 60))
        ) as session:
            async with session.post(
                url,
                json={"contents": [{"parts": [{"text": prompt}]}]},
                headers={"Content-Type": "application/json"}
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    logger.error(f"Gemini API error {response.status}: {body[:300]}")
                    return None
                return await response.json(content_type=None)

    def _parse_response(self, data: Optional[dict]) -> Optional[ThumbnailImage]:
        """Find the first inline image part in a generateContent response."""
        candidates = (data or {}).get("candidates") or []
        if not candidates:
            return None

        parts = (candidates[0].get("content") or {}).get("parts") or []
        for part in parts:
            inline = part.get("inline_data") or part.get("inlineData")
            if not inline:
                continue
            encoded = inline.get("data")
            mime_type = inline.get("mime_type") or inline.get("mimeType")
            if not encoded or not mime_type:
                continue
            try:
                return ThumbnailImage(base64.b64decode(encoded), mime_type)
            except (binascii.Error, ValueError) as e:
                logger.error(f"Could not decode image data: {e}")
                return None
        return None
