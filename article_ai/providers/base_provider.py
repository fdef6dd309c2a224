"""Base provider interface for generative-AI vendor adapters."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple
import asyncio
import json
import logging
import time

import aiohttp

from ..models.generation import AttemptOutcome, FailureKind, GenerationRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def classify_status(status: int, message: str) -> AttemptOutcome:
    """Map an HTTP status to the failure taxonomy when the vendor payload says nothing more."""
    if status == 429:
        kind = FailureKind.RATE_LIMITED
    elif status in (401, 403):
        kind = FailureKind.UNAUTHORIZED
    elif 400 <= status < 500:
        kind = FailureKind.INVALID_REQUEST
    else:
        kind = FailureKind.SERVER_ERROR
    return AttemptOutcome.failure(kind, message, status_code=status)


class BaseProvider(ABC):
    """Abstract base class for one vendor.

    Subclasses only describe the vendor's wire format; the transport, the
    per-call timeout and the translation of transport errors into
    ``AttemptOutcome`` live here so orchestration never sees an exception
    from a provider call (cancellation excepted).
    """

    BASE_URL = ""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    @property
    @abstractmethod
    def name(self) -> str:
        """Return provider name used in cascade entries."""
        pass

    @abstractmethod
    def _build_request(self, model: str, request: GenerationRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        """Return (url, headers, json payload) for one generation call."""
        pass

    @abstractmethod
    def _extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        """Pull generated text out of a successful response body."""
        pass

    def _classify_error(self, status: int, data: Dict[str, Any]) -> AttemptOutcome:
        """Map an error response to an outcome. Adapters refine with vendor error codes."""
        return classify_status(status, self._error_message(status, data))

    def _error_message(self, status: int, data: Dict[str, Any]) -> str:
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"{self.name} returned HTTP {status}"

    def _empty_response_message(self, data: Dict[str, Any]) -> str:
        return f"{self.name} returned no generated text"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(headers={"Content-Type": "application/json"})
            self._owns_session = True
        return self.session

    async def invoke(self, model: str, request: GenerationRequest) -> AttemptOutcome:
        """Issue one generation call and normalize whatever comes back."""
        if not self.api_key:
            return AttemptOutcome.failure(
                FailureKind.UNAUTHORIZED, f"No API key configured for {self.name}"
            )

        url, headers, payload = self._build_request(model, request)
        timeout = request.timeout or self.timeout
        session = await self._ensure_session()
        start_time = time.time()

        try:
            async with session.post(
                url, json=payload, headers=headers, timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                status = response.status
                data = self._decode(await response.read())
        except asyncio.TimeoutError:
            return AttemptOutcome.failure(
                FailureKind.NETWORK_ERROR, f"{self.name} call timed out after {timeout:.0f}s"
            )
        except aiohttp.ClientError as e:
            return AttemptOutcome.failure(
                FailureKind.NETWORK_ERROR, f"Error calling {self.name}: {e}"
            )

        latency_ms = (time.time() - start_time) * 1000
        logger.debug(f"{self.name}/{model} responded {status} in {latency_ms:.0f}ms")

        if status >= 400:
            return self._classify_error(status, data)

        text = self._extract_text(data)
        if not text or not text.strip():
            return AttemptOutcome.failure(
                FailureKind.EMPTY_RESPONSE, self._empty_response_message(data), status_code=status
            )
        return AttemptOutcome.success(text)

    @staticmethod
    def _decode(body: bytes) -> Dict[str, Any]:
        if not body:
            return {}
        # Error pages from proxies are not always valid UTF-8
        raw = body.decode("utf-8", errors="replace")
        try:
            data = json.loads(raw)
        except ValueError:
            # Proxies and load balancers answer outages with HTML
            return {"raw": raw[:500]}
        return data if isinstance(data, dict) else {"raw": data}

    async def close(self):
        """Close the aiohttp session if this provider created it."""
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, base_url={self.base_url!r})"
