import logging

from blueprint.core.config import Settings
from blueprint.domain.ai.errors import ConfigError
from blueprint.domain.ai.providers.openai import OpenAICompatibleBackend
from blueprint.domain.ai.service import StructuredGenerationService
from blueprint.domain.ai.types import ModelParameters


logger = logging.getLogger(__name__)


def build_generation_service(settings: Settings) -> StructuredGenerationService:
    defaults = ModelParameters(
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout_ms=settings.llm_timeout_ms,
    )
    try:
        backend = _build_backend(settings)
    except ConfigError as exc:
        # 기동은 막지 않고, 이후 모든 호출을 config_error로 즉시 실패시킨다.
        logger.warning("LLM backend not configured, generation disabled: %s", exc.message)
        return StructuredGenerationService(backend=None, defaults=defaults, config_error=exc.message)

    logger.info("LLM backend configured model=%s base_url=%s", backend.model, backend.base_url)
    return StructuredGenerationService(backend=backend, defaults=defaults)


def _build_backend(settings: Settings) -> OpenAICompatibleBackend:
    return OpenAICompatibleBackend(
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
    )
