"""Provider client: dispatches (provider, model, request) to the vendor adapter."""

from typing import Dict, Iterable, List
import logging

from ..models.generation import AttemptOutcome, FailureKind, GenerationRequest
from .base_provider import BaseProvider

logger = logging.getLogger(__name__)


class ProviderClient:
    """One adapter per vendor, looked up by name.

    Adapters are created once at startup and are read-only afterwards, so a
    single client is shared by every concurrent request.
    """

    def __init__(self, providers: Iterable[BaseProvider]):
        self._providers: Dict[str, BaseProvider] = {}
        for provider in providers:
            if provider.name in self._providers:
                raise ValueError(f"Duplicate provider adapter: {provider.name}")
            self._providers[provider.name] = provider

    @property
    def provider_names(self) -> List[str]:
        return list(self._providers)

    def get(self, provider: str) -> BaseProvider:
        return self._providers[provider]

    def __contains__(self, provider: str) -> bool:
        return provider in self._providers

    async def invoke(self, provider: str, model: str, request: GenerationRequest) -> AttemptOutcome:
        adapter = self._providers.get(provider)
        if adapter is None:
            return AttemptOutcome.failure(
                FailureKind.INVALID_REQUEST, f"No adapter registered for provider '{provider}'"
            )
        return await adapter.invoke(model, request)

    async def close(self):
        for provider in self._providers.values():
            await provider.close()
        logger.debug("Closed provider sessions")

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
