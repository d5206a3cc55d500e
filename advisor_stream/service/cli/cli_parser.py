"""CLI parser construction for advisor-stream.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import CHAT_FUNCTIONS, CLI_DEFAULT_SKILL_KIND


def _non_negative_int(v: str) -> int:
    val = int(v)
    if val < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return val


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``chat`` and ``validate`` subcommands. No I/O happens
        here.
    """
    p = argparse.ArgumentParser(
        prog="advisor-stream", description="Chat stream client (chat is a dry-run unless --execute)"
    )
    sub = p.add_subparsers(dest="cmd")

    # chat
    p_chat = sub.add_parser("chat", help="Send one message and stream the reply")
    p_chat.add_argument("message")
    p_chat.add_argument("--function", choices=CHAT_FUNCTIONS, default=None)
    p_chat.add_argument("--target-id", "--advisor-id", "--persona-id", "--book-id", dest="target_id", required=True)
    p_chat.add_argument("--user-id", default=None)
    p_chat.add_argument("--context", default="", help="Additional context (persona-chat only)")
    p_chat.add_argument("--base-url", default=None)
    p_chat.add_argument("--max-rebuffer", type=_non_negative_int, default=None)
    p_chat.add_argument("--execute", action="store_true")
    p_chat.add_argument("--json", action="store_true", help="Print the outcome as JSON after the reply")

    # validate
    p_val = sub.add_parser("validate", help="Validate a skill payload against a JSON Schema")
    p_val.add_argument("payload", help="Path to the payload JSON file")
    p_val.add_argument("schema", nargs="?", default=None, help="Path to the schema JSON file")
    p_val.add_argument("--kind", choices=("input", "output", "schema"), default=CLI_DEFAULT_SKILL_KIND)
    p_val.add_argument("--max-kb", type=float, default=None)

    return p


__all__ = ["build_parser"]
