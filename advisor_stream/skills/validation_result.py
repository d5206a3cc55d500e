"""Validation result value object."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List


@dataclass
class ValidationResult:
    """Outcome of a size or schema check.

    Attributes:
        valid: True when no check failed.
        errors: Human-readable messages in the order they were found.
    """

    valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True, errors=[])

    @classmethod
    def fail(cls, *errors: str) -> "ValidationResult":
        return cls(valid=False, errors=list(errors))

    @classmethod
    def merge(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        """Concatenate errors in order; valid only if every input is valid."""
        results = list(results)
        errors = [err for r in results for err in r.errors]
        return cls(valid=all(r.valid for r in results) and not errors, errors=errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


__all__ = ["ValidationResult"]
