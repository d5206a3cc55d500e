"""Timeout configuration for completion-function requests.

The streaming read has no timeout unless one is configured: a stalled
transport keeps the driver in ``STREAMING`` until the connection closes.
Deployments that need an upper bound on the gap between two chunks set
``ADVISOR_STREAM_READ_TIMEOUT_SECONDS``; the resulting ``httpx.ReadTimeout``
settles the stream with the ``timeout`` error code.

Supported environment variables (all optional, positive floats):
    ADVISOR_STREAM_CONNECT_TIMEOUT_SECONDS
    ADVISOR_STREAM_READ_TIMEOUT_SECONDS
    ADVISOR_STREAM_WRITE_TIMEOUT_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds (``None`` disables a bound).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        read_timeout_seconds: Waiting for the next chunk of the response.
        write_timeout_seconds: Sending the request body.
        pool_timeout_seconds: Acquiring a connection from the pool.
    """

    connect_timeout_seconds: Optional[float] = 10.0
    read_timeout_seconds: Optional[float] = None
    write_timeout_seconds: Optional[float] = 30.0
    pool_timeout_seconds: Optional[float] = 10.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.pool_timeout_seconds,
        )


def _parse_env_float(name: str, default: Optional[float]) -> Optional[float]:
    """Read a positive float from the environment, else return ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the timeout configuration derived from the environment."""
    defaults = TimeoutConfig()
    return TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(
            "ADVISOR_STREAM_CONNECT_TIMEOUT_SECONDS", defaults.connect_timeout_seconds
        ),
        read_timeout_seconds=_parse_env_float("ADVISOR_STREAM_READ_TIMEOUT_SECONDS", defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float(
            "ADVISOR_STREAM_WRITE_TIMEOUT_SECONDS", defaults.write_timeout_seconds
        ),
        pool_timeout_seconds=defaults.pool_timeout_seconds,
    )


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
