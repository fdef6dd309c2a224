from dataclasses import dataclass
from typing import Any, Awaitable, Dict, List, Optional, Union
import asyncio
import logging
import time

from ..errors import GenerationUnavailableError
from ..models.generation import AttemptOutcome, FailureKind, GenerationRequest
from ..monitoring.metrics import configuration_errors, record_attempt, record_result
from ..providers.registry import ProviderClient
from ..reliability.retry_strategy import RetryController, RetryPolicy, SleepFunc
from .cascade import Candidate, ModelCascade
from .results import AttemptRecord, ExhaustedFailure, GenerationSuccess, OrchestrationResult

logger = logging.getLogger(__name__)


@dataclass
class _Progress:
    """The step currently running for one request, read when the deadline fires."""

    candidate: Optional[Candidate] = None
    secondary: bool = False
    calls: int = 0
    last_outcome: Optional[AttemptOutcome] = None

    def start(self, candidate: Candidate, secondary: bool = False):
        self.candidate = candidate
        self.secondary = secondary
        self.calls = 0
        self.last_outcome = None

    def finish(self):
        self.candidate = None

    async def track(self, call: Awaitable[AttemptOutcome]) -> AttemptOutcome:
        self.calls += 1
        outcome = await call
        self.last_outcome = outcome
        return outcome


class FallbackOrchestrator:
    """Turns a prompt into generated text by walking the model cascade.

    Candidates are tried strictly in order, one at a time. Each gets its own
    retry loop for rate limiting; any other failure moves on to the next
    candidate. When the whole cascade fails, the secondary vendor gets a
    single call. Every failure along the way ends up in the attempt log of
    the returned ``ExhaustedFailure``.

    Worst case per request: ``len(cascade) * (1 + max_retries)`` primary
    calls plus one secondary call.
    """

    def __init__(
        self,
        client: ProviderClient,
        cascade: ModelCascade,
        retry_policy: Optional[RetryPolicy] = None,
        secondary: Optional[Candidate] = None,
        sleep: SleepFunc = asyncio.sleep,
        default_deadline: Optional[float] = None,
    ):
        self.client = client
        self.cascade = cascade
        self.retry_policy = retry_policy or RetryPolicy()
        self.secondary = secondary
        self.default_deadline = default_deadline
        self._retry = RetryController(self.retry_policy, sleep=sleep)

    async def generate(
        self,
        request: Union[GenerationRequest, str],
        deadline: Optional[float] = None,
    ) -> OrchestrationResult:
        """Run the cascade for one request.

        ``deadline`` bounds the whole run in seconds. When it fires, the
        in-flight provider call or backoff sleep is cancelled and the result
        is an ``ExhaustedFailure`` ending in a ``CANCELLED`` record. Falls
        back to ``default_deadline`` when not given.
        """
        if deadline is None:
            deadline = self.default_deadline
        if isinstance(request, str):
            request = GenerationRequest(prompt=request)

        log: List[AttemptRecord] = []
        progress = _Progress()
        start_time = time.time()

        try:
            if deadline is None:
                result = await self._run(request, log, progress)
            else:
                result = await asyncio.wait_for(self._run(request, log, progress), timeout=deadline)
        except asyncio.TimeoutError:
            result = self._deadline_exceeded(log, progress, deadline)
        except asyncio.CancelledError:
            logger.warning(f"Generation cancelled by caller after {len(log)} step(s)")
            record_result("cancelled", time.time() - start_time)
            raise

        if result.ok:
            record_result("secondary" if result.secondary else "primary", time.time() - start_time)
        else:
            record_result("cancelled" if result.cancelled else "exhausted", time.time() - start_time)
            logger.error(result.summary())
        return result

    async def generate_text(
        self,
        prompt: str,
        deadline: Optional[float] = None,
        **params: Any,
    ) -> str:
        """Consumer contract: generated text, or ``GenerationUnavailableError``."""
        result = await self.generate(GenerationRequest(prompt=prompt, **params), deadline=deadline)
        if not result.ok:
            raise GenerationUnavailableError(result)
        return result.text

    async def _run(
        self, request: GenerationRequest, log: List[AttemptRecord], progress: _Progress
    ) -> OrchestrationResult:
        for candidate in self.cascade:
            record = await self._step(candidate, request, progress)
            log.append(record)
            if record.outcome.ok:
                return GenerationSuccess(text=record.outcome.text, candidate=candidate, log=tuple(log))
            self._note_failure(record)

        if self.secondary is None:
            return ExhaustedFailure(log=tuple(log))

        logger.warning(f"Primary cascade exhausted; falling back to {self.secondary.label}")
        record = await self._secondary_step(request, progress)
        log.append(record)
        if record.outcome.ok:
            return GenerationSuccess(
                text=record.outcome.text, candidate=self.secondary, secondary=True, log=tuple(log)
            )
        self._note_failure(record)
        return ExhaustedFailure(log=tuple(log))

    async def _step(self, candidate: Candidate, request: GenerationRequest, progress: _Progress) -> AttemptRecord:
        """Run one candidate through the retry controller."""
        progress.start(candidate)
        verdict = await self._retry.run(
            candidate,
            lambda: progress.track(self.client.invoke(candidate.provider, candidate.model, request)),
        )
        progress.finish()
        return AttemptRecord(candidate=candidate, outcome=verdict.outcome, calls=verdict.calls)

    async def _secondary_step(self, request: GenerationRequest, progress: _Progress) -> AttemptRecord:
        """Exactly one call to the secondary vendor, never retried."""
        candidate = self.secondary
        logger.info(f"Calling secondary vendor {candidate.label}")
        progress.start(candidate, secondary=True)
        outcome = await progress.track(self.client.invoke(candidate.provider, candidate.model, request))
        progress.finish()
        record_attempt(candidate.provider, candidate.model, outcome)
        return AttemptRecord(candidate=candidate, outcome=outcome, calls=1, secondary=True)

    def _note_failure(self, record: AttemptRecord):
        kind = record.outcome.kind
        if kind.is_configuration_error:
            # Retrying never fixes these; an operator has to
            logger.warning(
                f"Configuration problem with {record.candidate.label}: {record.outcome.describe()}. "
                f"Check the API key and model name."
            )
            configuration_errors.labels(
                provider=record.candidate.provider, model=record.candidate.model, kind=kind.value
            ).inc()
        else:
            logger.warning(f"{record.candidate.label} failed: {record.outcome.describe()}")

    def _deadline_exceeded(
        self, log: List[AttemptRecord], progress: _Progress, deadline: float
    ) -> ExhaustedFailure:
        logger.warning(f"Generation deadline of {deadline}s exceeded after {len(log)} step(s)")
        candidate = progress.candidate
        if candidate is None:
            return ExhaustedFailure(log=tuple(log))

        message = f"deadline of {deadline}s exceeded"
        last = progress.last_outcome
        if last is not None:
            message = f"{message} after {last.describe()}"
        cancelled = AttemptRecord(
            candidate=candidate,
            outcome=AttemptOutcome.failure(
                FailureKind.CANCELLED, message, status_code=last.status_code if last else None
            ),
            calls=progress.calls,
            secondary=progress.secondary,
        )
        return ExhaustedFailure(log=tuple(log) + (cancelled,))

    async def probe_cascade(self, prompt: str = "Hi") -> Dict[str, Dict[str, Any]]:
        """Call every configured candidate once, without retries, and report which ones answer."""
        request = GenerationRequest(prompt=prompt)
        candidates = list(self.cascade)
        if self.secondary is not None:
            candidates.append(self.secondary)

        report: Dict[str, Dict[str, Any]] = {}
        for candidate in candidates:
            started = time.time()
            outcome = await self.client.invoke(candidate.provider, candidate.model, request)
            report[candidate.label] = {
                "status": "ok" if outcome.ok else outcome.kind.value,
                "message": "" if outcome.ok else outcome.message,
                "latency_ms": round((time.time() - started) * 1000, 1),
                "secondary": candidate is self.secondary,
            }
            logger.info(f"Probe {candidate.label}: {report[candidate.label]['status']}")
        return report

    def describe(self) -> Dict[str, Any]:
        policy = self.retry_policy
        return {
            "cascade": [c.label for c in self.cascade],
            "secondary": self.secondary.label if self.secondary else None,
            "retry": {
                "max_retries": policy.max_retries,
                "initial_delay": policy.initial_delay,
                "backoff_multiplier": policy.backoff_multiplier,
                "max_delay": policy.max_delay,
            },
            "worst_case_calls": self.cascade.worst_case_calls(policy, self.secondary),
            "worst_case_backoff_seconds": self.cascade.worst_case_backoff(policy),
        }
