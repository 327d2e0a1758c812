import json
import logging
import time
from typing import Any
from urllib.parse import urlparse

import httpx

from blueprint.domain.ai.errors import BackendError, ConfigError
from blueprint.domain.ai.types import (
    CompletionReply,
    ModelParameters,
    OtherFragment,
    ReplyFragment,
    TextFragment,
)


logger = logging.getLogger(__name__)


class OpenAICompatibleBackend:
    """Chat-completions backend for OpenAI-compatible endpoints (NVIDIA NIM, OpenAI, Groq)."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigError("llm_api_key_missing")
        if not model:
            raise ConfigError("llm_model_missing")
        parsed = urlparse(base_url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"llm_base_url_invalid:{base_url!r}")

        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def complete(
        self,
        prompt: str,
        *,
        parameters: ModelParameters,
    ) -> CompletionReply:
        endpoint = f"{self.base_url}/chat/completions"
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": parameters.temperature,
            "max_tokens": parameters.max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        # 클라이언트는 호출 단위로 닫혀서 타임아웃/취소 시에도 연결이 남지 않는다.
        # httpx 타임아웃은 단계별 상한이고, 전체 호출은 deadline 하나로 묶는다.
        deadline = time.monotonic() + parameters.timeout_sec
        try:
            with httpx.Client(timeout=parameters.timeout_sec, transport=self._transport) as client:
                with client.stream("POST", endpoint, json=payload, headers=headers) as response:
                    self._check_deadline(deadline, parameters)
                    response.raise_for_status()
                    chunks: list[bytes] = []
                    for chunk in response.iter_bytes():
                        chunks.append(chunk)
                        self._check_deadline(deadline, parameters)
            body = json.loads(b"".join(chunks))
        except httpx.TimeoutException as exc:
            raise self._timeout_error(parameters) from exc
        except httpx.HTTPStatusError as exc:
            raise BackendError(f"llm_http_status:{exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"llm_request_failed:{exc}") from exc
        except ValueError as exc:
            raise BackendError(f"llm_response_not_json:{exc}") from exc

        usage = body.get("usage") if isinstance(body, dict) else None
        logger.debug("chat completion received model=%s usage=%s", self.model, usage)
        return CompletionReply(fragments=self._extract_fragments(body))

    @staticmethod
    def _timeout_error(parameters: ModelParameters) -> BackendError:
        return BackendError(f"llm_request_timeout:{parameters.timeout_ms}ms", timed_out=True)

    @classmethod
    def _check_deadline(cls, deadline: float, parameters: ModelParameters) -> None:
        if time.monotonic() > deadline:
            raise cls._timeout_error(parameters)

    @staticmethod
    def _extract_fragments(response_json: Any) -> tuple[ReplyFragment, ...]:
        if not isinstance(response_json, dict):
            raise BackendError("llm_response_not_object")

        choices = response_json.get("choices")
        if not isinstance(choices, list) or not choices:
            raise BackendError("llm_choices_missing")

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message")
        if not isinstance(message, dict):
            raise BackendError("llm_message_missing")

        content = message.get("content")
        if isinstance(content, str):
            return (TextFragment(content),)

        if isinstance(content, list):
            fragments: list[ReplyFragment] = []
            for part in content:
                if isinstance(part, str):
                    fragments.append(TextFragment(part))
                elif isinstance(part, dict) and isinstance(part.get("text"), str):
                    fragments.append(TextFragment(part["text"]))
                else:
                    kind = part.get("type", "unknown") if isinstance(part, dict) else type(part).__name__
                    fragments.append(OtherFragment(kind=str(kind), payload=part))
            return tuple(fragments)

        raise BackendError("llm_content_missing")
