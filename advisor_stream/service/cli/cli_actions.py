"""CLI action handlers.

Purpose
-------
Subcommand handlers for the advisor-stream CLI. No top-level side effects;
safe to import in tests.

Fallback & Error Semantics
--------------------------
- ``chat`` without ``--execute`` only prints the request plan (no network).
- Execution errors are printed as JSON to stderr with a non-zero exit code.
- ``validate`` exits 0 when the payload is valid, 1 when not, 2 when the
  files cannot be read.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.models import ChatMessage
from ...config import get_chat_config
from ...config.defaults import ADVISOR_CHAT_FUNCTION, FUNCTIONS_PATH, PERSONA_CHAT_FUNCTION
from ...skills import validate_schema, validate_skill_input, validate_skill_output
from ..request_bodies import body_builder_for
from ..stream_driver import StreamDriver


def _body_kwargs(args: argparse.Namespace, function: str) -> Dict[str, Any]:
    if function == PERSONA_CHAT_FUNCTION:
        return {"additional_context": args.context, "user_id": args.user_id}
    if function == ADVISOR_CHAT_FUNCTION:
        return {"user_id": args.user_id}
    return {}


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "function": args.function,
        "base_url": args.base_url,
        "max_rebuffer_attempts": args.max_rebuffer,
    }


def plan_chat(args: argparse.Namespace) -> Dict[str, Any]:
    """Compute the request a ``chat --execute`` would send, without I/O."""
    cfg = get_chat_config(_overrides(args))
    function = cfg["function"]
    build = body_builder_for(function, args.target_id, **_body_kwargs(args, function))
    text = args.message.strip()
    return {
        "url": f"{cfg['base_url']}{FUNCTIONS_PATH}/{function}",
        "function": function,
        "api_key_present": bool(cfg.get("api_key")),
        "max_rebuffer_attempts": cfg.get("max_rebuffer_attempts"),
        "body": build([ChatMessage(role="user", content=text)], text),
    }


class _StdoutEcho:
    """Write only the new suffix of each cumulative update."""

    def __init__(self, write: Callable[[str], Any]) -> None:
        self._write = write
        self._printed = 0

    def __call__(self, content: str) -> None:
        self._write(content[self._printed:])
        self._printed = len(content)
        sys.stdout.flush()


def handle_chat(args: argparse.Namespace, *, driver_factory: Optional[Callable[..., StreamDriver]] = None) -> int:
    """Execute the ``chat`` subcommand.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed arguments.
    driver_factory: Optional[Callable]
        Injection point returning a configured driver (tests pass one backed
        by a mock transport). Defaults to :meth:`StreamDriver.from_config`.

    Returns
    -------
    int
        ``0`` on success or dry-run, ``1`` when the stream settled with an error.
    """
    if not args.message.strip():
        print(json.dumps({"error": "message must not be empty"}), file=sys.stderr)
        return 2
    if not args.execute:
        print(json.dumps(plan_chat(args), ensure_ascii=False))
        return 0

    cfg = get_chat_config(_overrides(args))
    function = cfg["function"]
    build = body_builder_for(function, args.target_id, **_body_kwargs(args, function))
    notices: list[Dict[str, str]] = []
    factory = driver_factory or StreamDriver.from_config
    driver = factory(
        build,
        overrides=_overrides(args),
        on_update=_StdoutEcho(sys.stdout.write),
        notify=lambda category, text: notices.append({"category": category, "text": text}),
    )
    logger = get_logger("advisor_stream.cli")
    ctx = LogContext(endpoint=function)
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1, emitted=None)

    outcome = driver.send_message(args.message)
    print()
    if args.json:
        print(
            json.dumps(
                {
                    "state": outcome.state.value,
                    "error_code": outcome.error_code.value if outcome.error_code else None,
                    "metrics": outcome.metrics.to_dict() if outcome.metrics else None,
                }
            )
        )
    if outcome.ok:
        normalized_log_event(logger, "cli.finalize", ctx, phase="finalize", attempt=1, emitted=bool(outcome.content))
        return 0
    normalized_log_event(
        logger,
        "cli.error",
        ctx,
        phase="finalize",
        attempt=1,
        error_code=outcome.error_code.value if outcome.error_code else None,
        emitted=False,
    )
    print(json.dumps({"error": outcome.error, "status": outcome.status, "notices": notices}), file=sys.stderr)
    return 1


def _read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def handle_validate(args: argparse.Namespace) -> int:
    """Execute the ``validate`` subcommand and print the result as JSON."""
    try:
        payload = _read_json(args.payload)
        schema = _read_json(args.schema) if args.schema else None
    except (OSError, ValueError) as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return 2

    if args.kind == "schema":
        result = validate_schema(payload)
    elif schema is None:
        print(json.dumps({"error": "a schema file is required"}), file=sys.stderr)
        return 2
    elif args.kind == "output":
        result = validate_skill_output(payload, schema, args.max_kb)
    else:
        result = validate_skill_input(payload, schema, args.max_kb)
    print(json.dumps(result.to_dict(), ensure_ascii=False))
    return 0 if result.valid else 1


__all__ = ["plan_chat", "handle_chat", "handle_validate"]
