"""advisor_stream.config.defaults
==============================

Central place for small, stable default values used across the
advisor_stream package and its CLI. These defaults can be overridden via
environment variables or an external configuration file.

Only plain constants live here; this module imports nothing from the rest of
the package to avoid circular dependencies.
"""

from __future__ import annotations

# ---- Completion functions ----
# Path under the base URL where completion functions are mounted.
FUNCTIONS_PATH = "/functions/v1"
ADVISOR_CHAT_FUNCTION = "advisor-chat"
PERSONA_CHAT_FUNCTION = "persona-chat"
BOOK_CHAT_FUNCTION = "book-chat"
CHAT_FUNCTIONS = (ADVISOR_CHAT_FUNCTION, PERSONA_CHAT_FUNCTION, BOOK_CHAT_FUNCTION)
DEFAULT_CHAT_FUNCTION = ADVISOR_CHAT_FUNCTION

# Local development base URL (the functions emulator port).
DEFAULT_BASE_URL = "http://127.0.0.1:54321"

# ---- Decoder ----
# None keeps re-buffering a malformed line until end of stream.
DEFAULT_MAX_REBUFFER_ATTEMPTS = None

# ---- Transport ----
# None disables the read timeout; the stream may idle indefinitely.
DEFAULT_READ_TIMEOUT_SECONDS = None

# ---- Notifications ----
RATE_LIMIT_NOTICE = "Rate limit exceeded. Please try again later."
PAYMENT_REQUIRED_NOTICE = "Payment required. Please add credits."
ERROR_MESSAGE_PREFIX = "❌ **Error:** "

# ---- Skill payload limits (KB) ----
SKILL_INPUT_MAX_KB_DEFAULT = 10
SKILL_OUTPUT_MAX_KB_DEFAULT = 100
VALIDATE_SIZE_MAX_KB_DEFAULT = 100

# ---- CLI ----
CLI_DEFAULT_SKILL_KIND = "input"


__all__ = [
    "FUNCTIONS_PATH",
    "ADVISOR_CHAT_FUNCTION",
    "PERSONA_CHAT_FUNCTION",
    "BOOK_CHAT_FUNCTION",
    "CHAT_FUNCTIONS",
    "DEFAULT_CHAT_FUNCTION",
    "DEFAULT_BASE_URL",
    "DEFAULT_MAX_REBUFFER_ATTEMPTS",
    "DEFAULT_READ_TIMEOUT_SECONDS",
    "RATE_LIMIT_NOTICE",
    "PAYMENT_REQUIRED_NOTICE",
    "ERROR_MESSAGE_PREFIX",
    "SKILL_INPUT_MAX_KB_DEFAULT",
    "SKILL_OUTPUT_MAX_KB_DEFAULT",
    "VALIDATE_SIZE_MAX_KB_DEFAULT",
    "CLI_DEFAULT_SKILL_KIND",
]
