"""Global test configuration and fixtures."""
import json
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from article_ai.models.generation import AttemptOutcome, FailureKind
from article_ai.orchestration.cascade import Candidate, ModelCascade
from article_ai.orchestration.fallback_manager import FallbackOrchestrator
from article_ai.reliability.retry_strategy import RetryPolicy


def ok(text: str) -> AttemptOutcome:
    return AttemptOutcome.success(text)


def rate_limited() -> AttemptOutcome:
    return AttemptOutcome.failure(FailureKind.RATE_LIMITED, "429 quota", status_code=429)


def server_error() -> AttemptOutcome:
    return AttemptOutcome.failure(FailureKind.SERVER_ERROR, "503 backend down", status_code=503)


def invalid_request() -> AttemptOutcome:
    return AttemptOutcome.failure(FailureKind.INVALID_REQUEST, "model not found", status_code=404)


Step = Union[AttemptOutcome, Callable[[], Any]]


class ScriptedClient:
    """Deterministic provider client.

    Each ``provider/model`` label maps to a list of steps consumed one per
    call; the last step repeats. A step is an outcome or an async callable.
    """

    def __init__(self, script: Dict[str, List[Step]]):
        self.script = {label: list(steps) for label, steps in script.items()}
        self.calls: List[str] = []
        self.prompts: List[str] = []

    async def invoke(self, provider, model, request):
        label = f"{provider}/{model}"
        self.calls.append(label)
        self.prompts.append(request.prompt)

        steps = self.script.get(label)
        if not steps:
            raise AssertionError(f"unexpected call to {label}")
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if callable(step):
            return await step()
        return step

    def count(self, label: str) -> int:
        return self.calls.count(label)


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns immediately and records delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(float(delay))


class FakeResponse:
    def __init__(self, status: int, body: Union[bytes, str, Dict[str, Any]]):
        self.status = status
        if isinstance(body, dict):
            body = json.dumps(body)
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Minimal aiohttp.ClientSession double for adapter tests."""

    def __init__(self, responses: Optional[List[FakeResponse]] = None, error: Optional[BaseException] = None):
        self.responses = list(responses or [])
        self.error = error
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

    async def close(self):
        self.closed = True


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def cascade() -> ModelCascade:
    return ModelCascade([
        Candidate("primary", "a", 0),
        Candidate("primary", "b", 1),
        Candidate("primary", "c", 2),
    ])


@pytest.fixture
def secondary() -> Candidate:
    return Candidate("backup", "fallback", -1)


@pytest.fixture
def make_orchestrator(cascade, sleep):
    """Build an orchestrator over the three-candidate cascade with a scripted client."""

    def factory(script, secondary=None, policy=None, sleep_func=None):
        client = ScriptedClient(script)
        orchestrator = FallbackOrchestrator(
            client,
            cascade,
            retry_policy=policy or RetryPolicy(max_retries=2, initial_delay=2.0, backoff_multiplier=2.0),
            secondary=secondary,
            sleep=sleep_func or sleep,
        )
        return orchestrator, client

    return factory
