"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `advisor_stream.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .chat_stream_error import ChatStreamError
from .classification import classify_exception, code_for_status

__all__ = ["ErrorCode", "ChatStreamError", "classify_exception", "code_for_status"]
