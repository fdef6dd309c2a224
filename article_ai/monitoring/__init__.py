from .metrics import (
    configuration_errors,
    generation_attempts,
    generation_results,
    generation_retries,
    record_attempt,
    record_result,
)

__all__ = [
    "configuration_errors",
    "generation_attempts",
    "generation_results",
    "generation_retries",
    "record_attempt",
    "record_result"
]
