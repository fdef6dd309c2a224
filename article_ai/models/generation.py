"""Request and per-attempt outcome types shared by providers and orchestration."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Normalized failure taxonomy every vendor adapter maps into."""

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    EMPTY_RESPONSE = "empty_response"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        """Default retry classification; only rate limiting is retried in place."""
        return self is FailureKind.RATE_LIMITED

    @property
    def is_configuration_error(self) -> bool:
        return self in (FailureKind.INVALID_REQUEST, FailureKind.UNAUTHORIZED)


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt plus optional generation parameters."""

    prompt: str
    max_output_tokens: Optional[int] = None
    temperature: Optional[float] = None
    timeout: Optional[float] = None  # per-call override, seconds

    def __post_init__(self):
        if not self.prompt or not self.prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        if self.max_output_tokens is not None and self.max_output_tokens <= 0:
            raise ValueError("max_output_tokens must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of a single provider call: generated text or a typed failure."""

    text: Optional[str] = None
    kind: Optional[FailureKind] = None
    message: str = ""
    retryable: bool = False
    status_code: Optional[int] = None

    @classmethod
    def success(cls, text: str) -> "AttemptOutcome":
        return cls(text=text)

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        message: str,
        retryable: Optional[bool] = None,
        status_code: Optional[int] = None,
    ) -> "AttemptOutcome":
        if retryable is None:
            retryable = kind.retryable
        return cls(kind=kind, message=message, retryable=retryable, status_code=status_code)

    @property
    def ok(self) -> bool:
        return self.kind is None

    def describe(self) -> str:
        if self.ok:
            return "success"
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{self.kind.value}{status}: {self.message}"
