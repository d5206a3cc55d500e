"""Unified configuration layer for the chat stream client.

Goals
-----
* Centralize defaults (base URL, completion function, decoder policy).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) named by
       ``ADVISOR_STREAM_CONFIG_FILE``
    3. Environment variables (``ADVISOR_STREAM_BASE_URL``, ...)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_chat_config()``.

External Config File (Optional)
-------------------------------
JSON is tried first, then YAML. Structure example:

```
base_url: https://project.supabase.co
function: persona-chat
max_rebuffer_attempts: 50
read_timeout_seconds: 120
```

Public API
----------
* get_chat_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .defaults import (
    DEFAULT_BASE_URL,
    DEFAULT_CHAT_FUNCTION,
    DEFAULT_MAX_REBUFFER_ATTEMPTS,
    DEFAULT_READ_TIMEOUT_SECONDS,
)
from .env import CONFIG_FILE_ENV, ENV_MAP, is_placeholder, resolve_env_value


DEFAULTS: Dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "api_key": None,
    "function": DEFAULT_CHAT_FUNCTION,
    "max_rebuffer_attempts": DEFAULT_MAX_REBUFFER_ATTEMPTS,
    "read_timeout_seconds": DEFAULT_READ_TIMEOUT_SECONDS,
}

_FILE_CACHE: Optional[Tuple[str, Dict[str, Any]]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless they hold placeholder values.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _parse_file(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    """Return the parsed config file, cached per path."""
    global _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV) or ""
    if _FILE_CACHE is not None and _FILE_CACHE[0] == path:
        return _FILE_CACHE[1]
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        data = _parse_file(Path(path).read_text(encoding="utf-8"))
    _FILE_CACHE = (path, data)
    return data


def _optional_int(value: Any) -> Optional[int]:
    if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
        return None
    parsed = int(value)
    if parsed < 0:
        raise ValueError("must be >= 0")
    return parsed


def _optional_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
        return None
    parsed = float(value)
    if parsed <= 0:
        raise ValueError("must be > 0")
    return parsed


_COERCE: Dict[str, Callable[[Any], Any]] = {
    "max_rebuffer_attempts": _optional_int,
    "read_timeout_seconds": _optional_float,
}


def _coerce(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize numeric fields; invalid values fall back to the defaults."""
    for key, fn in _COERCE.items():
        try:
            cfg[key] = fn(cfg.get(key))
        except (TypeError, ValueError):
            cfg[key] = DEFAULTS[key]
    if isinstance(cfg.get("base_url"), str):
        cfg["base_url"] = cfg["base_url"].rstrip("/")
    return cfg


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_MAP:
        val, _ = resolve_env_value(field)
        if val is not None:
            out[field] = val
    return out


def get_chat_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= {k: v for k, v in _load_external_config().items() if k in DEFAULTS}
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return _coerce(cfg)


def reset_config_cache() -> None:
    """Forget the cached config file and .env state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = [
    "get_chat_config",
    "reset_config_cache",
    "DEFAULTS",
]
