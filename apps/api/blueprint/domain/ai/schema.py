"""Declarative output schemas.

An output schema is a small tree of field nodes. The same tree is rendered
into the JSON schema shown to the model and interpreted by ``validate_value``
to re-check whatever the model returned.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Union

from jsonschema import Draft7Validator

from blueprint.domain.ai.errors import SchemaValidationError


JSON_SCHEMA_DIALECT = "http://json-schema.org/draft-07/schema#"
MAX_REPORTED_ISSUES = 8


@dataclass(frozen=True)
class StringField:
    description: str = ""
    optional: bool = False


@dataclass(frozen=True)
class NumberField:
    description: str = ""
    optional: bool = False
    integer: bool = False


@dataclass(frozen=True)
class BoolField:
    description: str = ""
    optional: bool = False


@dataclass(frozen=True)
class EnumField:
    values: tuple[str, ...]
    description: str = ""
    optional: bool = False

    def __post_init__(self) -> None:
        values = tuple(self.values)
        if not values:
            raise ValueError("enum_values_empty")
        object.__setattr__(self, "values", values)


@dataclass(frozen=True)
class ArrayField:
    items: "FieldSpec"
    description: str = ""
    optional: bool = False


@dataclass(frozen=True)
class ObjectField:
    fields: Mapping[str, "FieldSpec"]
    description: str = ""
    optional: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


FieldSpec = Union[StringField, NumberField, BoolField, EnumField, ArrayField, ObjectField]
OutputSchema = ObjectField


def to_json_schema(spec: FieldSpec, *, root: bool = True, strict: bool = True) -> dict[str, Any]:
    """Render ``spec`` as a draft-07 JSON schema.

    The strict rendering is the one shown to the model. The relaxed rendering
    used for validation lets optional fields be ``null`` and tolerates
    undeclared keys, which ``validate_value`` drops afterwards.
    """
    node = _render(spec, strict)
    if root:
        node["$schema"] = JSON_SCHEMA_DIALECT
    return node


def _render(spec: FieldSpec, strict: bool) -> dict[str, Any]:
    node: dict[str, Any]
    if isinstance(spec, StringField):
        node = {"type": "string"}
    elif isinstance(spec, NumberField):
        node = {"type": "integer" if spec.integer else "number"}
    elif isinstance(spec, BoolField):
        node = {"type": "boolean"}
    elif isinstance(spec, EnumField):
        node = {"type": "string", "enum": list(spec.values)}
    elif isinstance(spec, ArrayField):
        node = {"type": "array", "items": _render(spec.items, strict)}
    elif isinstance(spec, ObjectField):
        node = {
            "type": "object",
            "properties": {name: _render(child, strict) for name, child in spec.fields.items()},
            "required": [name for name, child in spec.fields.items() if not child.optional],
        }
        if strict:
            node["additionalProperties"] = False
    else:
        raise TypeError(f"unsupported_field_spec:{type(spec).__name__}")

    if spec.optional and not strict:
        node["type"] = [node["type"], "null"]
        if "enum" in node:
            node["enum"] = [*node["enum"], None]
    if spec.description:
        node["description"] = spec.description
    return node


def render_json_schema(spec: FieldSpec) -> str:
    return json.dumps(to_json_schema(spec), ensure_ascii=False, separators=(",", ":"))


def validate_value(value: Any, spec: FieldSpec) -> Any:
    """Return ``value`` checked against ``spec``.

    Objects come back with undeclared keys dropped. Optional fields may be
    absent or ``null``; required fields must be present and non-null, and
    arrays must be present even when empty. Every violation is collected and
    reported in one ``SchemaValidationError``.
    """
    validator = Draft7Validator(to_json_schema(spec, strict=False))
    issues: list[str] = []
    for error in validator.iter_errors(value):
        for issue in _describe(error):
            if issue not in issues:
                issues.append(issue)

    if issues:
        shown = "; ".join(issues[:MAX_REPORTED_ISSUES])
        if len(issues) > MAX_REPORTED_ISSUES:
            shown += f"; and {len(issues) - MAX_REPORTED_ISSUES} more"
        raise SchemaValidationError(f"schema_mismatch: {shown}", issues=tuple(issues))
    return _drop_undeclared(value, spec)


def _drop_undeclared(value: Any, spec: FieldSpec) -> Any:
    if value is None:
        return None
    if isinstance(spec, ArrayField):
        return [_drop_undeclared(item, spec.items) for item in value]
    if isinstance(spec, ObjectField):
        return {
            name: _drop_undeclared(value[name], child)
            for name, child in spec.fields.items()
            if name in value
        }
    return value


def _describe(error) -> list[str]:
    path = _format_path(error.absolute_path)

    if error.validator == "required":
        instance = error.instance if isinstance(error.instance, dict) else {}
        return [
            f"{_join(path, name)}: required field missing"
            for name in error.validator_value
            if name not in instance
        ]
    if error.validator == "type":
        expected = error.validator_value
        if not isinstance(expected, str):
            expected = "|".join(name for name in expected if name != "null")
        return [f"{_label(path)}: expected {expected}, received {_json_type_name(error.instance)}"]
    if error.validator == "enum":
        allowed = "|".join(str(option) for option in error.validator_value if option is not None)
        return [f"{_label(path)}: expected one of {allowed}, received {error.instance!r}"]
    return [f"{_label(path)}: {error.message}"]


def _format_path(parts) -> str:
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = _join(path, part)
    return path


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else str(name)


def _label(path: str) -> str:
    return path or "(root)"


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
