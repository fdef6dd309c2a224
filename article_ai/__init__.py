"""AI generation for the article pipeline: model cascade, retries and vendor fallback."""

from .errors import ArticleAIError, ConfigurationError, GenerationUnavailableError, ResponseFormatError
from .factory import build_orchestrator, configure_logging
from .models import Article, AttemptOutcome, FailureKind, GenerationRequest
from .orchestration import (
    AttemptRecord,
    Candidate,
    ExhaustedFailure,
    FallbackOrchestrator,
    GenerationSuccess,
    ModelCascade,
)
from .reliability import RetryPolicy

__version__ = "1.0.0"

__all__ = [
    "Article",
    "ArticleAIError",
    "AttemptOutcome",
    "AttemptRecord",
    "Candidate",
    "ConfigurationError",
    "ExhaustedFailure",
    "FailureKind",
    "FallbackOrchestrator",
    "GenerationRequest",
    "GenerationSuccess",
    "GenerationUnavailableError",
    "ModelCascade",
    "ResponseFormatError",
    "RetryPolicy",
    "build_orchestrator",
    "configure_logging"
]
