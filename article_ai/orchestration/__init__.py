from .cascade import Candidate, ModelCascade
from .fallback_manager import FallbackOrchestrator
from .results import AttemptRecord, ExhaustedFailure, GenerationSuccess, OrchestrationResult

__all__ = [
    "AttemptRecord",
    "Candidate",
    "ExhaustedFailure",
    "FallbackOrchestrator",
    "GenerationSuccess",
    "ModelCascade",
    "OrchestrationResult"
]
