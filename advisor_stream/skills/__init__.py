"""Skill payload validation."""

from .validation import (
    create_simple_schema,
    merge_validation_results,
    validate_input,
    validate_output,
    validate_schema,
    validate_size,
    validate_skill_input,
    validate_skill_output,
)
from .validation_result import ValidationResult

__all__ = [
    "ValidationResult",
    "create_simple_schema",
    "merge_validation_results",
    "validate_input",
    "validate_output",
    "validate_schema",
    "validate_size",
    "validate_skill_input",
    "validate_skill_output",
]
