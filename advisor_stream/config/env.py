"""advisor_stream.config.env
=========================

Environment variable mapping for chat client settings.

Design Notes
------------
- Canonical names are listed in ``ENV_MAP``. Settings that the hosted
  backend historically exposed under other names (the frontend build
  variables) are listed in ``ENV_ALIASES`` with the canonical name first to
  establish precedence.
- Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

CONFIG_FILE_ENV = "ADVISOR_STREAM_CONFIG_FILE"

# Config field -> canonical env var
ENV_MAP: Dict[str, str] = {
    "base_url": "ADVISOR_STREAM_BASE_URL",
    "api_key": "ADVISOR_STREAM_API_KEY",  # pragma: allowlist secret - env var name, not a secret
    "function": "ADVISOR_STREAM_FUNCTION",
    "max_rebuffer_attempts": "ADVISOR_STREAM_MAX_REBUFFER",
    "read_timeout_seconds": "ADVISOR_STREAM_READ_TIMEOUT_SECONDS",
}

# Config field -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "base_url": ("ADVISOR_STREAM_BASE_URL", "SUPABASE_URL", "VITE_SUPABASE_URL"),
    "api_key": (
        "ADVISOR_STREAM_API_KEY",
        "SUPABASE_PUBLISHABLE_KEY",
        "VITE_SUPABASE_PUBLISHABLE_KEY",
    ),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the string looks like a placeholder or test value.

    Heuristics: contains 'placeholder', 'changeme' or 'example', or starts
    with 'test_'. Case-insensitive.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_candidates(field: str) -> Iterable[str]:
    """Yield env var names for a config field, canonical first."""
    canonical = ENV_MAP.get(field)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(field, ()):
        if alias != canonical:
            yield alias


def resolve_env_value(field: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first non-empty candidate.

    ``(None, None)`` when nothing is set.
    """
    for name in get_env_var_candidates(field):
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "CONFIG_FILE_ENV",
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_env_value",
]
