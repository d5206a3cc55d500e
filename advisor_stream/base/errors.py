"""Unified chat stream error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``advisor_stream.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.chat_stream_error import ChatStreamError
from .errors_parts.classification import classify_exception, code_for_status

__all__ = ["ErrorCode", "ChatStreamError", "classify_exception", "code_for_status"]
