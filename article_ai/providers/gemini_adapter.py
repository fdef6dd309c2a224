"""Google Gemini provider adapter (Generative Language REST API)."""

from typing import Any, Dict, List, Optional, Tuple

from ..models.generation import AttemptOutcome, FailureKind, GenerationRequest
from .base_provider import BaseProvider, classify_status


class GeminiAdapter(BaseProvider):
    """Gemini adapter; the primary vendor of the default cascade."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    # google.rpc status codes carried in error.status
    STATUS_KINDS = {
        "RESOURCE_EXHAUSTED": FailureKind.RATE_LIMITED,
        "UNAUTHENTICATED": FailureKind.UNAUTHORIZED,
        "PERMISSION_DENIED": FailureKind.UNAUTHORIZED,
        "INVALID_ARGUMENT": FailureKind.INVALID_REQUEST,
        "NOT_FOUND": FailureKind.INVALID_REQUEST,
        "FAILED_PRECONDITION": FailureKind.INVALID_REQUEST,
        "UNAVAILABLE": FailureKind.SERVER_ERROR,
        "INTERNAL": FailureKind.SERVER_ERROR,
        "DEADLINE_EXCEEDED": FailureKind.SERVER_ERROR,
    }

    @property
    def name(self) -> str:
        return "gemini"

    def _build_request(self, model: str, request: GenerationRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        model_path = model if model.startswith("models/") else f"models/{model}"
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }

        generation_config = {}
        if request.max_output_tokens is not None:
            generation_config["maxOutputTokens"] = request.max_output_tokens
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature
        if generation_config:
            payload["generationConfig"] = generation_config

        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        return f"{self.base_url}/{model_path}:generateContent", headers, payload

    def _extract_text(self, data: Dict[str, Any]) -> Optional[str]:
        candidates: List[Dict[str, Any]] = data.get("candidates") or []
        if not candidates:
            return None

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    def _empty_response_message(self, data: Dict[str, Any]) -> str:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            return f"gemini blocked the prompt: {block_reason}"

        candidates = data.get("candidates") or []
        if candidates and candidates[0].get("finishReason"):
            return f"gemini returned no text (finishReason={candidates[0]['finishReason']})"
        return "gemini returned no candidates"

    def _classify_error(self, status: int, data: Dict[str, Any]) -> AttemptOutcome:
        message = self._error_message(status, data)
        error = data.get("error") if isinstance(data.get("error"), dict) else {}
        kind = self.STATUS_KINDS.get(error.get("status", ""))

        if kind is None:
            return classify_status(status, message)
        return AttemptOutcome.failure(kind, message, status_code=status)
