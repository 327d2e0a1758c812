from typing import Any

from fastapi import HTTPException


KNOWN_ERROR_CODES = {
    "config_error",
    "backend_error",
    "parse_error",
    "validation_error",
    "invalid_request",
    "unknown",
}

RETRYABLE_ERROR_CODES = {
    "backend_error",
    "parse_error",
    "validation_error",
}

_DEFAULT_MESSAGES = {
    "config_error": "LLM service configuration error",
    "backend_error": "LLM backend request failed",
    "parse_error": "LLM response was not valid JSON",
    "validation_error": "LLM response did not match the expected schema",
    "invalid_request": "Invalid request",
    "unknown": "Request failed",
}


def normalize_error_code(value: Any) -> str:
    raw = str(value or "").strip().lower()
    if raw in KNOWN_ERROR_CODES:
        return raw
    return "unknown"


def _compact(value: Any) -> str:
    return " ".join(str(value or "").split()).strip()


def _build_message(code: str, reason: str) -> str:
    message = _compact(reason)
    if message:
        return message[:260]
    return _DEFAULT_MESSAGES.get(code, "Request failed")


def build_structured_error_detail(
    *,
    error_code: str,
    message: str | None = None,
    retryable: bool | None = None,
    detail: Any = None,
) -> dict[str, Any]:
    code = normalize_error_code(error_code)
    message_text = _build_message(code, message or "")
    if retryable is None:
        retryable = code in RETRYABLE_ERROR_CODES

    detail_text = _compact(detail) or message_text

    return {
        "error_code": code,
        "message": message_text,
        "retryable": bool(retryable),
        "detail": detail_text,
    }


def _payload_from_detail_dict(detail: dict[str, Any]) -> tuple[str, str, bool, str]:
    code = normalize_error_code(detail.get("error_code"))
    message = _build_message(code, detail.get("message") or "")
    retryable = bool(detail.get("retryable")) if "retryable" in detail else code in RETRYABLE_ERROR_CODES
    detail_text = _compact(detail.get("detail")) or message
    return code, message, retryable, detail_text


def build_http_error_payload(exc: HTTPException, trace_id: str) -> dict[str, Any]:
    detail = exc.detail

    if isinstance(detail, dict):
        code, message, retryable, detail_text = _payload_from_detail_dict(detail)
    else:
        code = "invalid_request" if 400 <= exc.status_code < 500 else "unknown"
        message = _build_message(code, detail)
        retryable = False
        detail_text = _compact(detail) or message

    return {
        "error_code": code,
        "message": message,
        "retryable": retryable,
        "trace_id": trace_id,
        "detail": detail_text,
    }


def build_unexpected_error_payload(trace_id: str) -> dict[str, Any]:
    return {
        "error_code": "unknown",
        "message": "Unexpected server error",
        "retryable": False,
        "trace_id": trace_id,
        "detail": "unexpected_server_error",
    }
