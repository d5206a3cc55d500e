"""Skill payload size limits.

Purpose
-------
Provide environment-configurable size bounds for skill payloads and a single
measurement helper so every caller sizes payloads the same way.

Environment Variables
---------------------
- ``ADVISOR_STREAM_SKILL_INPUT_MAX_KB``: bound for skill input. Default: 10.
- ``ADVISOR_STREAM_SKILL_OUTPUT_MAX_KB``: bound for skill output. Default: 100.

Values are read when the functions are invoked, never on import. Invalid or
non-positive values fall back to the defaults.

Measurement
-----------
A payload's size is the UTF-8 byte length of its compact JSON serialization
(no whitespace between tokens, non-ASCII kept as-is) divided by 1024. A
lone surrogate, which JSON text can carry, counts as its three-byte form.
"""

from __future__ import annotations

import json
import os
from typing import Any

from ..config.defaults import SKILL_INPUT_MAX_KB_DEFAULT, SKILL_OUTPUT_MAX_KB_DEFAULT

SKILL_INPUT_MAX_KB_ENV = "ADVISOR_STREAM_SKILL_INPUT_MAX_KB"
SKILL_OUTPUT_MAX_KB_ENV = "ADVISOR_STREAM_SKILL_OUTPUT_MAX_KB"


def _env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_skill_input_max_kb() -> float:
    """Return the configured skill input bound in KB."""
    return _env_positive_float(SKILL_INPUT_MAX_KB_ENV, SKILL_INPUT_MAX_KB_DEFAULT)


def get_skill_output_max_kb() -> float:
    """Return the configured skill output bound in KB."""
    return _env_positive_float(SKILL_OUTPUT_MAX_KB_ENV, SKILL_OUTPUT_MAX_KB_DEFAULT)


def serialize_compact(payload: Any) -> str:
    """Serialize ``payload`` as compact JSON.

    Raises ``TypeError``/``ValueError`` for values JSON cannot represent.
    """
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def measure_payload_kb(payload: Any) -> float:
    """Return the serialized size of ``payload`` in KB (1 KB = 1024 bytes)."""
    return len(serialize_compact(payload).encode("utf-8", "surrogatepass")) / 1024


__all__ = [
    "SKILL_INPUT_MAX_KB_ENV",
    "SKILL_OUTPUT_MAX_KB_ENV",
    "get_skill_input_max_kb",
    "get_skill_output_max_kb",
    "serialize_compact",
    "measure_payload_kb",
]
