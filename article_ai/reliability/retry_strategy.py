from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional
import asyncio
import logging

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from ..models.generation import AttemptOutcome
from ..monitoring.metrics import generation_retries, record_attempt

if TYPE_CHECKING:
    from ..orchestration.cascade import Candidate

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for one candidate.

    Retry ``n`` (0-based) waits ``initial_delay * backoff_multiplier ** n``
    seconds, capped at ``max_delay``.
    """

    max_retries: int = 2
    initial_delay: float = 2.0
    backoff_multiplier: float = 2.0
    max_delay: float = 60.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")

    @property
    def max_calls(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_index: int) -> float:
        return min(self.initial_delay * (self.backoff_multiplier ** retry_index), self.max_delay)

    def total_backoff(self) -> float:
        return sum(self.delay_for(i) for i in range(self.max_retries))

    def wait_strategy(self) -> wait_exponential:
        return wait_exponential(
            multiplier=self.initial_delay,
            exp_base=self.backoff_multiplier,
            max=self.max_delay,
        )


@dataclass(frozen=True)
class CandidateVerdict:
    """Final outcome for one candidate and how many calls it took."""

    outcome: AttemptOutcome
    calls: int


def _should_retry(outcome: AttemptOutcome) -> bool:
    return not outcome.ok and outcome.retryable


def _last_outcome(retry_state: RetryCallState) -> AttemptOutcome:
    return retry_state.outcome.result()


class RetryController:
    """Repeats a single (provider, model) call on retryable failures.

    The controller holds only read-only policy; every ``run`` builds its own
    ``AsyncRetrying`` so attempt counters and delays are request-scoped and
    concurrent requests never share retry state.
    """

    def __init__(self, policy: Optional[RetryPolicy] = None, sleep: SleepFunc = asyncio.sleep):
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def run(
        self,
        candidate: "Candidate",
        invoke: Callable[[], Awaitable[AttemptOutcome]],
    ) -> CandidateVerdict:
        calls = 0

        async def attempt() -> AttemptOutcome:
            nonlocal calls
            calls += 1
            logger.info(f"Calling {candidate.label} (attempt {calls}/{self.policy.max_calls})")
            outcome = await invoke()
            record_attempt(candidate.provider, candidate.model, outcome)
            return outcome

        def before_sleep(retry_state: RetryCallState) -> None:
            outcome = retry_state.outcome.result()
            delay = retry_state.next_action.sleep
            logger.warning(
                f"{candidate.label} attempt {retry_state.attempt_number} failed: "
                f"{outcome.describe()}. Retrying in {delay:.2f}s"
            )
            generation_retries.labels(provider=candidate.provider, model=candidate.model).inc()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_calls),
            wait=self.policy.wait_strategy(),
            retry=retry_if_result(_should_retry),
            before_sleep=before_sleep,
            retry_error_callback=_last_outcome,
            sleep=self._sleep,
        )
        outcome = await retrying(attempt)

        if outcome.ok and calls > 1:
            logger.info(f"{candidate.label} succeeded after {calls} attempts")
        elif not outcome.ok:
            logger.warning(f"Giving up on {candidate.label} after {calls} attempt(s): {outcome.describe()}")

        return CandidateVerdict(outcome=outcome, calls=calls)
