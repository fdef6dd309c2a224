"""Orchestration results and the per-request attempt log."""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..models.generation import AttemptOutcome, FailureKind
from .cascade import Candidate


@dataclass(frozen=True)
class AttemptRecord:
    """Verdict for one primary candidate, or the single secondary-vendor call."""

    candidate: Candidate
    outcome: AttemptOutcome
    calls: int = 1
    secondary: bool = False

    def describe(self) -> str:
        stage = "secondary" if self.secondary else f"#{self.candidate.rank}"
        return f"[{stage}] {self.candidate.label} x{self.calls}: {self.outcome.describe()}"


@dataclass(frozen=True)
class GenerationSuccess:
    text: str
    candidate: Candidate
    secondary: bool = False
    log: Tuple[AttemptRecord, ...] = ()

    ok = True

    @property
    def total_calls(self) -> int:
        return sum(record.calls for record in self.log)


@dataclass(frozen=True)
class ExhaustedFailure:
    """Terminal failure carrying every attempted outcome in call order."""

    log: Tuple[AttemptRecord, ...]

    ok = False

    @property
    def total_calls(self) -> int:
        return sum(record.calls for record in self.log)

    @property
    def cancelled(self) -> bool:
        return bool(self.log) and self.log[-1].outcome.kind is FailureKind.CANCELLED

    @property
    def last_outcome(self) -> Optional[AttemptOutcome]:
        return self.log[-1].outcome if self.log else None

    def kinds(self) -> List[FailureKind]:
        return [record.outcome.kind for record in self.log]

    def summary(self) -> str:
        """Operator-facing diagnostics. Contains raw provider messages."""
        if not self.log:
            return "All candidates exhausted: nothing attempted"
        lines = [f"All candidates exhausted after {len(self.log)} step(s):"]
        lines.extend(f"  {record.describe()}" for record in self.log)
        return "\n".join(lines)


OrchestrationResult = Union[GenerationSuccess, ExhaustedFailure]
