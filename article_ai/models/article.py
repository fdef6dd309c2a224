from pydantic import BaseModel
from typing import Optional


class Article(BaseModel):
    """Article record as read from the article store."""

    id: Optional[int] = None
    title: str
    url: str = ""
    content: str = ""
    updated_content: Optional[str] = None
    published_date: Optional[str] = None

    @property
    def body(self) -> str:
        """Refreshed content when present, otherwise the scraped content."""
        return self.updated_content or self.content
