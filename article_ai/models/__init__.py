from .article import Article
from .generation import AttemptOutcome, FailureKind, GenerationRequest

__all__ = [
    "Article",
    "AttemptOutcome",
    "FailureKind",
    "GenerationRequest"
]
