import json
import math
import re
from typing import Any, Iterable

from blueprint.domain.ai.errors import ResponseParseError
from blueprint.domain.ai.types import ReplyFragment, TextFragment


_FENCED_BLOCK_PATTERN = re.compile(r"```(?:json)?([\s\S]+?)```")


def collect_text(fragments: Iterable[ReplyFragment]) -> str:
    return "\n".join(fragment.text for fragment in fragments if isinstance(fragment, TextFragment))


def extract_json_candidate(text: str) -> str:
    """Cut the JSON payload out of a free-form model reply.

    The first fenced block wins; otherwise the whole reply is used. The
    candidate is then trimmed to start at the first ``{`` and end at the last
    ``}``. A reply holding several top-level objects is trimmed to span all of
    them and will fail to parse.
    """
    candidate = text.strip()

    match = _FENCED_BLOCK_PATTERN.search(candidate)
    if match and match.group(1):
        candidate = match.group(1).strip()

    if not candidate.startswith("{"):
        start = candidate.find("{")
        if start < 0:
            raise ResponseParseError("json_object_start_missing", raw_text=text)
        candidate = candidate[start:]

    if not candidate.endswith("}"):
        end = candidate.rfind("}")
        if end < 0:
            raise ResponseParseError("json_object_end_missing", raw_text=text)
        candidate = candidate[: end + 1]

    return candidate


def parse_json_candidate(candidate: str, *, raw_text: str) -> Any:
    try:
        return json.loads(candidate, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except ValueError as exc:
        raise ResponseParseError(f"json_decode_failed:{exc}", raw_text=raw_text) from exc


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non_standard_json_constant:{token}")


def _parse_finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise ValueError(f"number_out_of_range:{token[:40]}")
    return value
