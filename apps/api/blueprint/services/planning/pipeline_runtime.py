from __future__ import annotations

import logging
from typing import Any, Callable

from blueprint.domain.ai.errors import ErrorKind
from blueprint.domain.ai.types import GenerationResult


logger = logging.getLogger(__name__)

FORMAT_FAILURE_KINDS = {ErrorKind.PARSE, ErrorKind.VALIDATION}
# 형식 오류는 더 엄격한 지시문으로 한 번만 재시도한다.
MAX_FORMAT_RETRIES = 1


class PlanningFailure(RuntimeError):
    def __init__(
        self,
        *,
        pipeline: str,
        kind: str,
        status_code: int,
        retryable: bool,
        reason: str,
        attempt_count: int,
    ) -> None:
        self.pipeline = pipeline
        self.kind = kind
        self.status_code = status_code
        self.retryable = retryable
        self.reason = reason
        self.attempt_count = attempt_count
        super().__init__(f"{pipeline}:{kind}:{reason}")


def normalize_error_reason(value: str) -> str:
    return " ".join(str(value or "").split())[:260] or "llm_generation_failed"


def format_pipeline_error_detail(pipeline: str, kind: str, reason: str) -> str:
    return f"{pipeline}_failed:{kind}:{normalize_error_reason(reason)}"


def classify_generation_failure(result: GenerationResult) -> tuple[int, bool]:
    """Return ``(status_code, retryable)`` for a failed generation result."""
    if result.error_kind is ErrorKind.CONFIG:
        return (503, False)
    if result.error_kind is ErrorKind.BACKEND:
        return (504 if result.timed_out else 502, True)
    if result.error_kind in FORMAT_FAILURE_KINDS:
        return (422, True)
    return (502, False)


def run_generation_with_retry(
    call: Callable[[str | None], GenerationResult],
    *,
    pipeline: str,
    max_attempts: int = 2,
) -> tuple[Any, int]:
    """Run ``call`` until it succeeds or the retry policy gives up.

    ``call`` receives the reason the previous attempt's output was unusable,
    or ``None``, so it can tighten its formatting instructions. Backend
    failures are retried up to ``max_attempts``; parse and validation
    failures at most once; configuration failures never.
    """
    attempts = max(1, int(max_attempts))
    format_retries = 0
    retry_hint: str | None = None

    for attempt in range(1, attempts + 1):
        result = call(retry_hint)
        if result.ok:
            return result.value, attempt

        status_code, retryable = classify_generation_failure(result)
        should_retry = attempt < attempts and retryable
        if result.error_kind in FORMAT_FAILURE_KINDS:
            should_retry = should_retry and format_retries < MAX_FORMAT_RETRIES
            format_retries += 1
            retry_hint = normalize_error_reason(result.message)

        kind = result.error_kind.value if result.error_kind else "backend_error"
        if should_retry:
            logger.info("%s attempt %d failed with %s, retrying", pipeline, attempt, kind)
            continue
        raise PlanningFailure(
            pipeline=pipeline,
            kind=kind,
            status_code=status_code,
            retryable=retryable,
            reason=result.message,
            attempt_count=attempt,
        )

    raise PlanningFailure(
        pipeline=pipeline,
        kind=ErrorKind.BACKEND.value,
        status_code=502,
        retryable=False,
        reason="llm_retry_exhausted",
        attempt_count=attempts,
    )
