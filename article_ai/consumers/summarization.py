"""Article summarization with a truncated-text fallback."""

from typing import Optional
import logging
import re

from pydantic import BaseModel

from ..models.article import Article
from ..models.generation import GenerationRequest

logger = logging.getLogger(__name__)

MAX_ARTICLE_CHARS = 8000
FALLBACK_SUMMARY_CHARS = 300
SUMMARY_TIMEOUT = 15.0

SUMMARY_PROMPT = """Summarize the following blog article in 3-4 sentences.
Write plain prose, no headings or bullet points.

Title: {title}

{body}
"""


class Summary(BaseModel):
    text: str
    ai_generated: bool
    model: Optional[str] = None


def clip(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, on a word boundary when possible."""
    text = re.sub(r"\s+", " ", text or "").strip()
    if len(text) <= limit:
        return text
    cut = text[:limit]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:") + "..."


def truncated_summary(article: Article, limit: int = FALLBACK_SUMMARY_CHARS) -> str:
    return clip(article.body, limit) or article.title


async def summarize_article(
    orchestrator,
    article: Article,
    max_chars: int = MAX_ARTICLE_CHARS,
    timeout: float = SUMMARY_TIMEOUT,
) -> Summary:
    """AI summary of ``article``; degrades to the opening of the article text."""
    prompt = SUMMARY_PROMPT.format(title=article.title, body=clip(article.body, max_chars))
    result = await orchestrator.generate(GenerationRequest(prompt=prompt, timeout=timeout))

    if not result.ok:
        logger.warning(f"Summary for '{article.title}' degraded to truncated text")
        return Summary(text=truncated_summary(article), ai_generated=False)

    return Summary(text=result.text.strip(), ai_generated=True, model=result.candidate.label)

