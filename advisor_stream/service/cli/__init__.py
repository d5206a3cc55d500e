"""advisor-stream CLI (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``. Performs no chat
or validation logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_chat, handle_validate
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code.
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.cmd == "chat":
        return handle_chat(args)
    if args.cmd == "validate":
        return handle_validate(args)
    p.print_help()
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
