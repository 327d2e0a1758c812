from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from blueprint.domain.ai.errors import ErrorKind
from blueprint.domain.ai.schema import OutputSchema


class ModelParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    # 구조화 출력은 낮은 temperature에서 가장 안정적이다.
    temperature: float = Field(default=0.2, ge=0.0, le=1.0)
    max_tokens: int = Field(default=4000, gt=0)
    timeout_ms: int = Field(default=60000, gt=0)

    @property
    def timeout_sec(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class GenerationRequest:
    instruction_text: str
    output_schema: OutputSchema
    model_parameters: ModelParameters | None = None


@dataclass(frozen=True)
class TextFragment:
    text: str


@dataclass(frozen=True)
class OtherFragment:
    kind: str
    payload: Any = None


ReplyFragment = Union[TextFragment, OtherFragment]


@dataclass(frozen=True)
class CompletionReply:
    fragments: tuple[ReplyFragment, ...] = field(default_factory=tuple)

    @classmethod
    def from_text(cls, text: str) -> "CompletionReply":
        return cls(fragments=(TextFragment(text),))


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one structured generation call.

    ``raw_text`` is kept for diagnostics on parse and validation failures and
    must never be shown to end users.
    """

    value: Any = None
    error_kind: ErrorKind | None = None
    message: str = ""
    raw_text: str | None = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, value: Any) -> "GenerationResult":
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        raw_text: str | None = None,
        *,
        timed_out: bool = False,
    ) -> "GenerationResult":
        return cls(error_kind=kind, message=message, raw_text=raw_text, timed_out=timed_out)
