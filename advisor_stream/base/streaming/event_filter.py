"""Classification of framed lines.

Recognized shapes:
    ``:...``            comment / keep-alive, ignored
    blank line          ignored
    ``data: <payload>`` data event, payload trimmed
    payload ``[DONE]``  terminator
Anything else is ignored without error; the upstream protocol may emit
fields (``event:``, ``id:``, ``retry:``) this client does not use.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

COMMENT_MARKER = ":"
DATA_PREFIX = "data: "
TERMINATOR_TOKEN = "[DONE]"


class FrameKind(str, Enum):
    IGNORABLE = "ignorable"
    DATA = "data"
    TERMINATOR = "terminator"


@dataclass(frozen=True)
class FramedLine:
    """A classified line; ``payload`` is set only for ``DATA``."""

    kind: FrameKind
    payload: Optional[str] = None


_IGNORABLE = FramedLine(FrameKind.IGNORABLE)
_TERMINATOR = FramedLine(FrameKind.TERMINATOR)


def classify_line(line: str) -> FramedLine:
    """Classify one framed line (see module docstring for the rules)."""
    if not line.strip() or line.startswith(COMMENT_MARKER):
        return _IGNORABLE
    if not line.startswith(DATA_PREFIX):
        return _IGNORABLE
    payload = line[len(DATA_PREFIX):].strip()
    if payload == TERMINATOR_TOKEN:
        return _TERMINATOR
    return FramedLine(FrameKind.DATA, payload)


__all__ = [
    "COMMENT_MARKER",
    "DATA_PREFIX",
    "TERMINATOR_TOKEN",
    "FrameKind",
    "FramedLine",
    "classify_line",
]
