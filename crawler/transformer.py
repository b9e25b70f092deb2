"""Transform step: rewrite article text through a chat-completions model."""
import asyncio
import json
import logging
import random
import re
from dataclasses import dataclass
from typing import Optional
import aiohttp

from api.models.article import Article, Language
from crawler.prompts import STYLE_PROMPTS, instruction_prompt, render
from shared.config import Settings, settings as default_settings
from shared.errors import TransformError

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 50
_CHAR_COUNT_RE = re.compile(r"\(\d+\s*characters?\)", re.IGNORECASE)
_QUOTES = "\"'"


@dataclass
class TransformOutcome:
    """Result of a transform attempt.

    ``article`` always carries transformed fields; when ``applied`` is false
    they are copies of the originals and ``reason`` says why.
    """
    article: Article
    applied: bool
    reason: Optional[str] = None
    style: Optional[str] = None


def clean_title(title: str) -> str:
    """Drop "(NN characters)" annotations and surrounding quotes."""
    title = _CHAR_COUNT_RE.sub("", title).strip()
    if title[:1] in _QUOTES:
        title = title[1:]
    if title[-1:] in _QUOTES:
        title = title[:-1]
    return title


def untransformed(article: Article) -> Article:
    return article.model_copy(update={
        "transformed_title": article.original_title,
        "transformed_content": article.original_content,
        "tags": list(article.tags or []),
    })


class ContentTransformer:
    """Produces rewritten titles, bodies and tags for articles."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def select_prompt(self, style: Optional[str] = None, custom_prompt: Optional[str] = None):
        """Return ``(template, style_name)`` for a request."""
        if custom_prompt:
            return instruction_prompt(custom_prompt), "custom"

        style = style or self.settings.prompt_style or "random"
        if style == "random":
            style = random.choice(list(STYLE_PROMPTS))
        if style not in STYLE_PROMPTS:
            logger.warning(f"Unknown prompt style {style!r}, using direct")
            style = "direct"
        return STYLE_PROMPTS[style], style

    async def transform(
        self,
        article: Article,
        custom_prompt: Optional[str] = None,
        style: Optional[str] = None
    ) -> TransformOutcome:
        """
        Rewrite an article. Never raises.

        Without a text-generation key, or for short non-Turkish content, the
        original fields are copied over and ``applied`` is false. Any model
        or parsing failure does the same with the failure as ``reason``.
        """
        if not self.settings.has_feature("ai-transformation"):
            logger.warning(f"No OPENROUTER_API_KEY for {article.id} - skipping transformation")
            return TransformOutcome(untransformed(article), False, "no text-generation credential")

        if article.language != Language.TR and len(article.original_content) < MIN_CONTENT_LENGTH:
            logger.warning(
                f"Content too short for {article.id} ({len(article.original_content)} chars) - skipping"
            )
            return TransformOutcome(untransformed(article), False, "content too short")

        template, style_name = self.select_prompt(style, custom_prompt)
        prompt = render(
            template,
            article.original_title,
            article.original_content[:self.settings.max_content_length],
            article.source.value
        )

        try:
            logger.info(f"Transforming {article.id} with style {style_name}")
            result = await self._complete(prompt)
        except (TransformError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Transform failed for {article.id}: {e}")
            return TransformOutcome(untransformed(article), False, str(e) or type(e).__name__, style_name)
        except Exception as e:
            logger.exception(f"Unexpected transform error for {article.id}: {e}")
            return TransformOutcome(untransformed(article), False, f"Unexpected error: {e}", style_name)

        title = clean_title(str(result.get("transformedTitle") or "")) or article.original_title
        tags = result.get("tags")
        if not isinstance(tags, list):
            tags = article.tags
        transformed = article.model_copy(update={
            "transformed_title": title,
            "transformed_content": str(result.get("transformedContent") or "") or article.original_content,
            "tags": [str(tag) for tag in tags],
        })
        logger.info(f"Transformed {article.id}: {article.original_title!r} -> {title!r}")
        return TransformOutcome(transformed, True, None, style_name)

    async def _complete(self, prompt: str) -> dict:
        """Call the chat-completions endpoint and decode the JSON reply."""
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=max(self.settings.fetch_timeout, 60))
        ) as session:
            async with session.post(
                self.settings.openrouter_url,
                json={
                    "model": self.settings.research_model,
                    "messages": [{"role": "user", "content": prompt}],
                    "response_format": {"type": "json_object"},
                },
                headers={
                    "Authorization": f"Bearer {self.settings.openrouter_api_key}",
                    "Content-Type": "application/json",
                    "HTTP-Referer": self.settings.public_base_url or "https://localhost",
                    "X-Title": "News Data Transformer",
                }
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise TransformError(f"Model API returned HTTP {response.status}: {body[:200]}")
                data = await response.json(content_type=None)

        try:
            content = data["choices"][0]["message"]["content"]
            result = json.loads(content)
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            raise TransformError(f"Malformed model reply: {e}")
        if not isinstance(result, dict):
            raise TransformError("Model reply is not a JSON object")
        return result
