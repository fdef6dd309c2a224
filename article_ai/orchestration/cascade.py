"""Model cascade policy: the ordered (provider, model) candidates to try."""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ..errors import ConfigurationError
from ..reliability.retry_strategy import RetryPolicy


@dataclass(frozen=True)
class Candidate:
    """One (provider, model) pair. Lower rank is tried first."""

    provider: str
    model: str
    rank: int = 0

    def __post_init__(self):
        if not self.provider or not self.provider.strip():
            raise ValueError("candidate provider must be non-empty")
        if not self.model or not self.model.strip():
            raise ValueError("candidate model must be non-empty")

    @property
    def label(self) -> str:
        return f"{self.provider}/{self.model}"

    @classmethod
    def parse(cls, entry: str, rank: int = 0) -> "Candidate":
        """Parse ``provider:model``."""
        provider, sep, model = entry.strip().partition(":")
        if not sep or not provider.strip() or not model.strip():
            raise ConfigurationError(f"Invalid candidate '{entry}', expected 'provider:model'")
        return cls(provider=provider.strip().lower(), model=model.strip(), rank=rank)


class ModelCascade:
    """Immutable, ordered sequence of candidates (fastest/cheapest first)."""

    def __init__(self, candidates: Iterable[Candidate]):
        ordered = tuple(sorted(candidates, key=lambda c: c.rank))
        if not ordered:
            raise ConfigurationError("Model cascade must contain at least one candidate")

        seen = set()
        for candidate in ordered:
            key = (candidate.provider, candidate.model)
            if key in seen:
                raise ConfigurationError(f"Duplicate cascade candidate: {candidate.label}")
            seen.add(key)

        self._candidates: Tuple[Candidate, ...] = ordered

    @classmethod
    def parse(cls, value: str) -> "ModelCascade":
        """Build a cascade from ``"gemini:gemini-2.0-flash, gemini:gemini-1.5-flash"``."""
        entries = [entry for entry in value.split(",") if entry.strip()]
        return cls(Candidate.parse(entry, rank=index) for index, entry in enumerate(entries))

    @property
    def candidates(self) -> Tuple[Candidate, ...]:
        return self._candidates

    @property
    def providers(self) -> List[str]:
        return sorted({c.provider for c in self._candidates})

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def worst_case_calls(self, policy: RetryPolicy, secondary: Optional[Candidate] = None) -> int:
        """Upper bound on provider calls for a single request."""
        return len(self) * policy.max_calls + (1 if secondary else 0)

    def worst_case_backoff(self, policy: RetryPolicy) -> float:
        """Total backoff sleep, in seconds, if every candidate exhausts its retries."""
        return len(self) * policy.total_backoff()

    def __repr__(self) -> str:
        return f"ModelCascade([{', '.join(c.label for c in self._candidates)}])"
