"""Describe how related articles connect to the one being read."""

from typing import Sequence

from ..models.article import Article
from .summarization import clip

MAX_RELATED = 5
SNIPPET_CHARS = 300

RELATED_PROMPT = """The reader is looking at the article "{title}".
In 2-3 sentences, describe what the related articles below add to it.

{related}
"""


async def describe_related_articles(
    orchestrator,
    article: Article,
    related: Sequence[Article],
) -> str:
    others = [r for r in related if r.url != article.url or not r.url][:MAX_RELATED]
    if not others:
        return ""

    listing = "\n".join(
        f"{index}. {other.title}: {clip(other.body, SNIPPET_CHARS)}"
        for index, other in enumerate(others, start=1)
    )
    text = await orchestrator.generate_text(RELATED_PROMPT.format(title=article.title, related=listing))
    return text.strip()
