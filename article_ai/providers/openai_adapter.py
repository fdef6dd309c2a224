"""OpenAI provider adapter (chat completions REST API)."""

from typing import Any, Dict, Optional, Tuple

from ..models.generation import AttemptOutcome, FailureKind, GenerationRequest
from .base_provider import BaseProvider, classify_status


class OpenAIAdapter(BaseProvider):
    """OpenAI adapter; used as the secondary vendor by default."""

    BASE_URL = "https://api.openai.com/v1"

    def __init__(self, api_key: Optional[str], organization_id: Optional[str] = None, **kwargs):
        super().__init__(api_key, **kwargs)
        self.org_id = organization_id

    @property
    def name(self) -> str:
        return "openai"

    def _build_request(self, model: str, request: GenerationRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        payload: Dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.max_output_tokens is not None:
            payload["max_tokens"] = request.max_output_tokens
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.org_id:
            headers["OpenAI-Organization"] = self.org_id

        return f"{self.base_url}/chat/completions", headers, payload

    def _extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        choices = data.get("choices") or []
        if not choices:
            return None
        return (choices[0].get("message") or {}).get("content")

    def _classify_error(self, status: int, data: Dict[str, Any]) -> AttemptOutcome:
        message = self._error_message(status, data)
        error = data.get("error") if isinstance(data.get("error"), dict) else {}
        code = error.get("code") or error.get("type")

        if code == "insufficient_quota":
            # A 429, but the billing quota will not come back within a backoff window
            return AttemptOutcome.failure(
                FailureKind.RATE_LIMITED, message, retryable=False, status_code=status
            )
        if code == "invalid_api_key":
            return AttemptOutcome.failure(FailureKind.UNAUTHORIZED, message, status_code=status)
        if code == "model_not_found":
            return AttemptOutcome.failure(FailureKind.INVALID_REQUEST, message, status_code=status)
        return classify_status(status, message)
