"""Incremental stream decoder.

Ties the line framer, event filter and payload decoder together and applies
the re-buffer policy:

- ``Fragment``: emitted in delivery order.
- ``Terminator``: stops processing for the rest of the current batch. The
  unprocessed lines go back onto the framer and are seen again with the next
  chunk; the caller keeps reading until the transport closes.
- ``Incomplete``: the offending line and everything after it go back onto
  the framer and processing stops until more bytes arrive. With
  ``max_rebuffer_attempts`` set, a line that keeps failing at the head of the
  buffer is dropped once the ceiling is exceeded.

``finish`` runs the final flush exactly once. Each remaining line gets one
more decode attempt; terminators are skipped and unparseable payloads are
dropped and counted.
"""
from __future__ import annotations

import logging
import time
from typing import List, Optional

from ..log_support import LogContext
from ..logging import get_logger, log_event
from .decode_result import Fragment, Incomplete, Terminator
from .decoder_metrics import DecoderMetrics
from .line_framer import Chunk, LineFramer
from .payload_decoder import decode_line


class StreamDecoder:
    """Turn raw transport chunks into text fragments."""

    def __init__(
        self,
        *,
        max_rebuffer_attempts: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        if max_rebuffer_attempts is not None and max_rebuffer_attempts < 0:
            raise ValueError("max_rebuffer_attempts must be >= 0 or None")
        self._framer = LineFramer()
        self._max_rebuffer = max_rebuffer_attempts
        self._logger = logger or get_logger("advisor_stream.decoder")
        self._ctx = ctx
        self._stalled_line: Optional[str] = None
        self._stall_count = 0
        self._finished = False
        self._t0 = time.perf_counter()
        self.metrics = DecoderMetrics()

    @property
    def pending(self) -> str:
        """Raw text still buffered in the framer."""
        return self._framer.pending

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, chunk: Chunk) -> List[str]:
        """Consume one transport chunk and return the fragments it yields."""
        if self._finished:
            raise RuntimeError("decoder already finished")
        return self._drain(self._framer.feed(chunk))

    def finish(self) -> List[str]:
        """Flush the buffer at end of stream; later calls return ``[]``."""
        if self._finished:
            return []
        self._finished = True
        out: List[str] = []
        for line in self._framer.flush():
            result = decode_line(line)
            if isinstance(result, Fragment):
                self._emit(result.text, out)
            elif isinstance(result, Terminator):
                self.metrics.terminated = True
            elif isinstance(result, Incomplete):
                self._drop(line, phase="flush")
        self.metrics.total_duration_ms = self._elapsed_ms()
        return out

    def _drain(self, lines: List[str]) -> List[str]:
        out: List[str] = []
        for idx, line in enumerate(lines):
            result = decode_line(line)
            if isinstance(result, Fragment):
                self._emit(result.text, out)
            elif isinstance(result, Terminator):
                self.metrics.terminated = True
                self._framer.push_back(lines[idx + 1:])
                break
            elif isinstance(result, Incomplete):
                if self._exceeds_ceiling(line):
                    self._drop(line, phase="rebuffer_ceiling")
                    continue
                self._framer.push_back(lines[idx:])
                self.metrics.rebuffered += 1
                log_event(
                    self._logger,
                    "stream.rebuffer",
                    self._ctx,
                    level=logging.DEBUG,
                    attempt=self._stall_count,
                    line_chars=len(line),
                )
                break
        return out

    def _exceeds_ceiling(self, line: str) -> bool:
        if line == self._stalled_line:
            self._stall_count += 1
        else:
            self._stalled_line = line
            self._stall_count = 1
        if self._max_rebuffer is None or self._stall_count <= self._max_rebuffer:
            return False
        self._stalled_line = None
        self._stall_count = 0
        return True

    def _emit(self, text: str, out: List[str]) -> None:
        if self.metrics.emitted == 0:
            self.metrics.time_to_first_fragment_ms = self._elapsed_ms()
        self.metrics.emitted += 1
        out.append(text)

    def _drop(self, line: str, *, phase: str) -> None:
        self.metrics.dropped += 1
        log_event(
            self._logger,
            "stream.decode_dropped",
            self._ctx,
            level=logging.DEBUG,
            phase=phase,
            line_chars=len(line),
        )

    def _elapsed_ms(self) -> float:
        return round((time.perf_counter() - self._t0) * 1000.0, 3)


__all__ = ["StreamDecoder"]
