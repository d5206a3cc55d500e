"""Streaming decode pipeline: framer, filter, payload decoder, accumulator."""

from .accumulator import Accumulator
from .decode_result import DecodeResult, Fragment, Ignorable, Incomplete, Terminator
from .decoder_metrics import DecoderMetrics
from .event_filter import FrameKind, FramedLine, classify_line
from .line_framer import LineFramer
from .payload_decoder import decode_line, decode_payload
from .stream_decoder import StreamDecoder

__all__ = [
    "Accumulator",
    "DecodeResult",
    "Fragment",
    "Ignorable",
    "Incomplete",
    "Terminator",
    "DecoderMetrics",
    "FrameKind",
    "FramedLine",
    "classify_line",
    "LineFramer",
    "decode_line",
    "decode_payload",
    "StreamDecoder",
]
