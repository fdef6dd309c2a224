"""Exception hierarchy for AI generation."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .orchestration.results import ExhaustedFailure


GENERATION_UNAVAILABLE_MESSAGE = "AI generation is currently unavailable. Please try again later."


class ArticleAIError(Exception):
    """Base class for article_ai errors."""


class ConfigurationError(ArticleAIError):
    """Raised at startup when the cascade or provider settings are invalid."""


class GenerationUnavailableError(ArticleAIError):
    """Every candidate (and the secondary vendor) failed.

    The string form is safe to show end users. Provider error text is only
    reachable through ``result`` / ``diagnostics()``.
    """

    def __init__(self, result: Optional["ExhaustedFailure"] = None):
        super().__init__(GENERATION_UNAVAILABLE_MESSAGE)
        self.result = result

    def diagnostics(self) -> str:
        if self.result is None:
            return "no attempts recorded"
        return self.result.summary()


class ResponseFormatError(ArticleAIError):
    """Generated text could not be parsed into the requested structure."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
