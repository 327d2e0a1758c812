from typing import Protocol

from blueprint.domain.ai.types import CompletionReply, ModelParameters


class CompletionBackend(Protocol):
    """Text-generation backend contract: complete one prompt."""

    def complete(
        self,
        prompt: str,
        *,
        parameters: ModelParameters,
    ) -> CompletionReply:
        ...
