"""Structured generation on top of a chat-completion backend."""

from blueprint.domain.ai.factory import build_generation_service
from blueprint.domain.ai.service import StructuredGenerationService
from blueprint.domain.ai.types import GenerationRequest, GenerationResult, ModelParameters

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "ModelParameters",
    "StructuredGenerationService",
    "build_generation_service",
]
