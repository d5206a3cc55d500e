"""JSON Schema and size validation for skill payloads.

Every function returns a :class:`ValidationResult`; none of them raise for
bad payloads or bad schemas. Schema checks use Draft 7 with all errors
collected and format checking enabled. Error strings look like
``"/items/0/name: 'name' is a required property"`` with ``root`` standing in
for an empty instance path.

Composite checks (``validate_skill_input`` / ``validate_skill_output``) run
the size bound first and return its failure without attempting the schema.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional, Union

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError

from ..config.defaults import VALIDATE_SIZE_MAX_KB_DEFAULT
from ..utils.payload_limits import (
    get_skill_input_max_kb,
    get_skill_output_max_kb,
    measure_payload_kb,
)
from .validation_result import ValidationResult

JSONSchema = Union[Mapping[str, Any], bool]
SimpleType = Literal["string", "number", "boolean", "object", "array"]
SIMPLE_TYPES = ("string", "number", "boolean", "object", "array")


def _describe(exc: Exception) -> str:
    if isinstance(exc, SchemaError):
        return exc.message
    return str(exc) or type(exc).__name__


def _format_path(error: Any) -> str:
    parts = list(error.absolute_path)
    if not parts:
        return "root"
    return "/" + "/".join(str(p) for p in parts)


def _build_validator(schema: JSONSchema) -> Draft7Validator:
    Draft7Validator.check_schema(schema)
    return Draft7Validator(schema, format_checker=FormatChecker())


def validate_input(payload: Any, schema: JSONSchema) -> ValidationResult:
    """Validate ``payload`` against ``schema``, collecting every error."""
    try:
        validator = _build_validator(schema)
        errors = [f"{_format_path(err)}: {err.message}" for err in validator.iter_errors(payload)]
    except Exception as exc:  # schema compilation and reference errors become data
        return ValidationResult.fail(f"Schema compilation error: {_describe(exc)}")
    return ValidationResult.fail(*errors) if errors else ValidationResult.ok()


def validate_output(payload: Any, schema: JSONSchema) -> ValidationResult:
    """Validate a skill's output; same rules as :func:`validate_input`."""
    return validate_input(payload, schema)


def validate_size(payload: Any, max_kb: float = VALIDATE_SIZE_MAX_KB_DEFAULT) -> ValidationResult:
    """Fail when the compact JSON form of ``payload`` exceeds ``max_kb``."""
    try:
        size_kb = measure_payload_kb(payload)
    except (TypeError, ValueError, RecursionError) as exc:
        return ValidationResult.fail(f"Size validation error: {_describe(exc)}")
    if size_kb > max_kb:
        return ValidationResult.fail(f"Data size ({size_kb:.2f}KB) exceeds maximum ({max_kb:g}KB)")
    return ValidationResult.ok()


def validate_skill_input(
    payload: Any,
    schema: JSONSchema,
    max_kb: Optional[float] = None,
) -> ValidationResult:
    """Size check (default bound 10KB, env-configurable), then schema."""
    size = validate_size(payload, get_skill_input_max_kb() if max_kb is None else max_kb)
    if not size.valid:
        return size
    return validate_input(payload, schema)


def validate_skill_output(
    payload: Any,
    schema: JSONSchema,
    max_kb: Optional[float] = None,
) -> ValidationResult:
    """Size check (default bound 100KB, env-configurable), then schema."""
    size = validate_size(payload, get_skill_output_max_kb() if max_kb is None else max_kb)
    if not size.valid:
        return size
    return validate_output(payload, schema)


def validate_schema(schema: Any) -> ValidationResult:
    """Meta-validate ``schema`` itself."""
    try:
        Draft7Validator.check_schema(schema)
    except Exception as exc:
        return ValidationResult.fail(f"Invalid schema: {_describe(exc)}")
    return ValidationResult.ok()


def create_simple_schema(type_: SimpleType) -> Dict[str, Any]:
    """Return a minimal schema for one of the basic JSON types.

    Objects accept any properties; arrays hold strings.
    """
    if type_ not in SIMPLE_TYPES:
        raise ValueError(f"unsupported schema type: {type_!r}")
    schema: Dict[str, Any] = {"type": type_}
    if type_ == "object":
        schema["properties"] = {}
        schema["additionalProperties"] = True
    elif type_ == "array":
        schema["items"] = {"type": "string"}
    return schema


def merge_validation_results(*results: ValidationResult) -> ValidationResult:
    """Combine results: errors concatenated in order, validity ANDed."""
    return ValidationResult.merge(results)


__all__ = [
    "JSONSchema",
    "SIMPLE_TYPES",
    "validate_input",
    "validate_output",
    "validate_size",
    "validate_skill_input",
    "validate_skill_output",
    "validate_schema",
    "create_simple_schema",
    "merge_validation_results",
]
