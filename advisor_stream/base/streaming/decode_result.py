"""Typed outcome of decoding one framed line.

Replaces exception-driven control flow in the decode loop: the stream decoder
branches on these variants, and ``Incomplete`` makes the re-buffer path
explicit.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Fragment:
    """A non-empty increment of assistant text."""

    text: str


@dataclass(frozen=True)
class Terminator:
    """The ``[DONE]`` sentinel: logical end of generation."""


@dataclass(frozen=True)
class Ignorable:
    """A line that carries nothing for the accumulator."""

    reason: str = ""


@dataclass(frozen=True)
class Incomplete:
    """A data line whose payload did not parse; kept for a later retry."""

    line: str


DecodeResult = Union[Fragment, Terminator, Ignorable, Incomplete]

__all__ = ["Fragment", "Terminator", "Ignorable", "Incomplete", "DecodeResult"]
