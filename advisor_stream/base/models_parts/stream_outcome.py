"""
Result of one ``send_message`` call.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors_parts.error_code import ErrorCode
from ..streaming.decoder_metrics import DecoderMetrics
from .stream_state import StreamState


@dataclass
class StreamOutcome:
    """Summary of a submission handled by the stream driver.

    Attributes:
        state: Settled state (``SUCCESS``/``ERROR``), or the unchanged current
            state when the submission was rejected.
        rejected: True when nothing was sent (empty input or a stream is
            already active).
        content: Final assistant text (empty on error or rejection).
        error_code: Normalized error code when the stream failed.
        error: User-facing error text when the stream failed.
        status: HTTP status of a non-2xx response, if any.
        metrics: Decoder counters for the stream, when one was opened.
    """

    state: StreamState
    rejected: bool = False
    content: str = ""
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None
    status: Optional[int] = None
    metrics: Optional[DecoderMetrics] = None

    @property
    def ok(self) -> bool:
        return self.state is StreamState.SUCCESS and not self.rejected


__all__ = ["StreamOutcome"]
