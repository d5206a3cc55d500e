"""Decode ``data:`` payloads into typed results.

``decode_payload`` handles the payload text of a single data event;
``decode_line`` runs a raw framed line through the event filter first.

Mapping:
    JSON parse failure or nesting too deep  -> Incomplete
    valid JSON, non-empty first delta text  -> Fragment
    valid JSON, anything else               -> Ignorable
"""
from __future__ import annotations

import json

from pydantic import ValidationError

from ..dto.completion_chunk import CompletionChunk
from .decode_result import DecodeResult, Fragment, Ignorable, Incomplete, Terminator
from .event_filter import DATA_PREFIX, FrameKind, classify_line


def decode_payload(payload: str) -> DecodeResult:
    """Decode one data payload (already stripped of the ``data: `` prefix)."""
    try:
        obj = json.loads(payload)
    except (json.JSONDecodeError, RecursionError):
        return Incomplete(f"{DATA_PREFIX}{payload}")
    if not isinstance(obj, dict):
        return Ignorable("non_object_payload")
    try:
        text = CompletionChunk.model_validate(obj).first_delta_content()
    except (ValidationError, RecursionError):
        return Ignorable("unexpected_shape")
    if not text:
        return Ignorable("no_content")
    return Fragment(text)


def decode_line(line: str) -> DecodeResult:
    """Classify and decode one framed line.

    ``Incomplete`` results carry the original line so it can be pushed back
    onto the framer verbatim.
    """
    framed = classify_line(line)
    if framed.kind is FrameKind.TERMINATOR:
        return Terminator()
    if framed.kind is FrameKind.IGNORABLE:
        return Ignorable("filtered")
    result = decode_payload(framed.payload or "")
    if isinstance(result, Incomplete):
        return Incomplete(line)
    return result


__all__ = ["decode_payload", "decode_line"]
