"""Chat with a single article."""

from typing import Literal, Sequence

from pydantic import BaseModel

from ..models.article import Article
from .summarization import clip

MAX_CONTEXT_CHARS = 6000
MAX_HISTORY_TURNS = 6


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


def build_chat_prompt(article: Article, message: str, history: Sequence[ChatTurn] = ()) -> str:
    lines = [
        "You are answering questions about the following article. "
        "Use only the article; say so if it does not contain the answer.",
        "",
        f"Title: {article.title}",
        "",
        clip(article.body, MAX_CONTEXT_CHARS),
        "",
    ]

    recent = list(history)[-MAX_HISTORY_TURNS:]
    if recent:
        lines.append("Conversation so far:")
        lines.extend(f"{turn.role.capitalize()}: {turn.content}" for turn in recent)
        lines.append("")

    lines.append(f"User: {message}")
    lines.append("Assistant:")
    return "\n".join(lines)


async def chat_with_article(
    orchestrator,
    article: Article,
    message: str,
    history: Sequence[ChatTurn] = (),
) -> str:
    """Reply to ``message``; ``GenerationUnavailableError`` propagates to the caller."""
    if not message.strip():
        raise ValueError("message must not be empty")
    reply = await orchestrator.generate_text(build_chat_prompt(article, message, history))
    return reply.strip()
