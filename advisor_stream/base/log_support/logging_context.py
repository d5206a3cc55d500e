"""Structured logging context object for chat streams.

This module defines :class:`LogContext`, a dataclass carrying the fields
shared by every event of one stream (completion function, base URL, request
id) plus free-form extras. ``to_dict`` merges ``extra`` and prunes ``None``
values for clean structured output.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for stream logging events."""

    endpoint: Optional[str] = None
    base_url: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
