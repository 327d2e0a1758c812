from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config_error"
    BACKEND = "backend_error"
    PARSE = "parse_error"
    VALIDATION = "validation_error"


class GenerationError(RuntimeError):
    """Base class for structured-generation failures."""

    kind: ErrorKind = ErrorKind.BACKEND

    def __init__(self, message: str, *, raw_text: str | None = None) -> None:
        self.message = message
        self.raw_text = raw_text
        super().__init__(f"{self.kind.value}:{message}")


class ConfigError(GenerationError):
    kind = ErrorKind.CONFIG


class BackendError(GenerationError):
    kind = ErrorKind.BACKEND

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        self.timed_out = timed_out
        super().__init__(message)


class ResponseParseError(GenerationError):
    kind = ErrorKind.PARSE


class SchemaValidationError(GenerationError):
    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        issues: tuple[str, ...] = (),
        raw_text: str | None = None,
    ) -> None:
        self.issues = issues
        super().__init__(message, raw_text=raw_text)
