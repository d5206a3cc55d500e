"""Counters collected while decoding one stream."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class DecoderMetrics:
    """Per-stream decoder counters.

    Fields:
      emitted: fragments handed to the accumulator
      rebuffered: times a line was pushed back after a failed parse
      dropped: payloads discarded (flush failure or retry ceiling)
      terminated: a ``[DONE]`` terminator was seen
      time_to_first_fragment_ms: latency from decoder start to first fragment
      total_duration_ms: decoder start to final flush
    """

    emitted: int = 0
    rebuffered: int = 0
    dropped: int = 0
    terminated: bool = False
    time_to_first_fragment_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["DecoderMetrics"]
