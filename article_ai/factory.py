"""Startup wiring: logging, provider adapters and the orchestrator."""

from typing import Optional
import asyncio
import logging

from .config import Settings, get_settings
from .errors import ConfigurationError
from .orchestration.cascade import Candidate, ModelCascade
from .orchestration.fallback_manager import FallbackOrchestrator
from .providers.gemini_adapter import GeminiAdapter
from .providers.openai_adapter import OpenAIAdapter
from .providers.registry import ProviderClient
from .reliability.retry_strategy import RetryPolicy, SleepFunc

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown LOG_LEVEL: {settings.LOG_LEVEL}")
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_provider_client(settings: Settings) -> ProviderClient:
    return ProviderClient([
        GeminiAdapter(
            settings.GEMINI_API_KEY,
            base_url=settings.GEMINI_BASE_URL,
            timeout=settings.PROVIDER_TIMEOUT,
        ),
        OpenAIAdapter(
            settings.OPENAI_API_KEY,
            organization_id=settings.OPENAI_ORGANIZATION,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.PROVIDER_TIMEOUT,
        ),
    ])


def build_retry_policy(settings: Settings) -> RetryPolicy:
    try:
        return RetryPolicy(
            max_retries=settings.GENERATION_MAX_RETRIES,
            initial_delay=settings.GENERATION_INITIAL_DELAY,
            backoff_multiplier=settings.GENERATION_BACKOFF_MULTIPLIER,
            max_delay=settings.GENERATION_MAX_DELAY,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid retry settings: {e}") from e


def _secondary_candidate(settings: Settings, client: ProviderClient) -> Optional[Candidate]:
    if not settings.SECONDARY_CANDIDATE.strip():
        return None

    candidate = Candidate.parse(settings.SECONDARY_CANDIDATE, rank=-1)
    if candidate.provider not in client:
        raise ConfigurationError(f"Unknown secondary provider: {candidate.provider}")
    if not client.get(candidate.provider).api_key:
        logger.warning(f"Secondary vendor {candidate.label} disabled: no API key configured")
        return None
    return candidate


def build_orchestrator(
    settings: Optional[Settings] = None,
    client: Optional[ProviderClient] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> FallbackOrchestrator:
    """Build the orchestrator once at process start; it is safe to share across requests."""
    settings = settings or get_settings()
    client = client or build_provider_client(settings)

    cascade = ModelCascade.parse(settings.GENERATION_CASCADE)
    for provider in cascade.providers:
        if provider not in client:
            raise ConfigurationError(f"No adapter for cascade provider '{provider}'")
        if not client.get(provider).api_key:
            logger.warning(f"No API key for {provider}; its cascade candidates will fail as unauthorized")

    orchestrator = FallbackOrchestrator(
        client,
        cascade,
        retry_policy=build_retry_policy(settings),
        secondary=_secondary_candidate(settings, client),
        sleep=sleep,
        default_deadline=settings.GENERATION_DEADLINE,
    )
    logger.info(f"Generation orchestrator ready: {orchestrator.describe()}")
    return orchestrator
