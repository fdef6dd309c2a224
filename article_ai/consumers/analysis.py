"""Structured per-article analysis (sentiment, quality, entities) as JSON."""

from typing import List, Literal
import json
import logging
import re

from pydantic import BaseModel, Field, ValidationError

from ..errors import ResponseFormatError
from ..models.article import Article
from .summarization import MAX_ARTICLE_CHARS, clip

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """Analyze the blog article below and answer with a single JSON object
and nothing else, using exactly these keys:
  "sentiment": one of "positive", "neutral", "negative"
  "quality_score": integer from 0 to 10
  "category": a short topic label
  "entities": list of people, organizations and products mentioned
  "key_points": list of at most 5 short key points

Title: {title}

{body}
"""

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class ArticleAnalysis(BaseModel):
    sentiment: Literal["positive", "neutral", "negative"]
    quality_score: int = Field(ge=0, le=10)
    category: str
    entities: List[str] = []
    key_points: List[str] = []


def parse_analysis(text: str) -> ArticleAnalysis:
    """Parse model output into an ``ArticleAnalysis``, tolerating code fences and chatter."""
    cleaned = _FENCE.sub("", text.strip())
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ResponseFormatError("No JSON object in analysis response", raw_text=text)

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Malformed analysis JSON: {e}", raw_text=text) from e

    if isinstance(data.get("sentiment"), str):
        data["sentiment"] = data["sentiment"].strip().lower()

    try:
        return ArticleAnalysis.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError(f"Analysis JSON failed validation: {e}", raw_text=text) from e


async def analyze_article(orchestrator, article: Article, max_chars: int = MAX_ARTICLE_CHARS) -> ArticleAnalysis:
    prompt = ANALYSIS_PROMPT.format(title=article.title, body=clip(article.body, max_chars))
    text = await orchestrator.generate_text(prompt)
    try:
        return parse_analysis(text)
    except ResponseFormatError:
        logger.warning(f"Unparseable analysis for '{article.title}'")
        raise
