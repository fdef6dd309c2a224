from .retry_strategy import CandidateVerdict, RetryController, RetryPolicy

__all__ = [
    "CandidateVerdict",
    "RetryController",
    "RetryPolicy"
]
