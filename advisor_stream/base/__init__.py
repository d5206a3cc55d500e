"""
Streaming Client Base Package

Exports the transport-agnostic building blocks of the chat stream client:

- Models: conversation messages, stream states and outcomes
- Errors: normalized error codes and the stream exception type
- Streaming: line framing, event filtering, payload decoding, accumulation
- Runtime: cancellation tokens, timeout config, logging helpers
"""

from .models import ChatMessage, Role, StreamOutcome, StreamState
from .errors import ChatStreamError, ErrorCode, classify_exception, code_for_status
from .cancellation import CancellationToken, CancelledError
from .timeouts import TimeoutConfig, get_timeout_config
from .logging import LogContext, configure_logger, get_logger, log_event, normalized_log_event
from .streaming import (
    Accumulator,
    DecoderMetrics,
    Fragment,
    Ignorable,
    Incomplete,
    LineFramer,
    StreamDecoder,
    Terminator,
    classify_line,
    decode_line,
    decode_payload,
)

__all__ = [
    # Models
    "ChatMessage",
    "Role",
    "StreamOutcome",
    "StreamState",
    # Errors
    "ChatStreamError",
    "ErrorCode",
    "classify_exception",
    "code_for_status",
    # Runtime
    "CancellationToken",
    "CancelledError",
    "TimeoutConfig",
    "get_timeout_config",
    "LogContext",
    "configure_logger",
    "get_logger",
    "log_event",
    "normalized_log_event",
    # Streaming
    "Accumulator",
    "DecoderMetrics",
    "Fragment",
    "Ignorable",
    "Incomplete",
    "LineFramer",
    "StreamDecoder",
    "Terminator",
    "classify_line",
    "decode_line",
    "decode_payload",
]
