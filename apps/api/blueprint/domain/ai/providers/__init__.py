"""Text-generation backends."""

from blueprint.domain.ai.providers.base import CompletionBackend
from blueprint.domain.ai.providers.openai import OpenAICompatibleBackend

__all__ = ["CompletionBackend", "OpenAICompatibleBackend"]
