"""Newline framing for chunked transport bodies.

The framer owns the raw frame buffer: text received but not yet returned as a
complete line. Byte chunks pass through an incremental UTF-8 decoder, so a
multi-byte character split across two reads is reassembled rather than
replaced.
"""
from __future__ import annotations

import codecs
from typing import List, Sequence, Union

Chunk = Union[bytes, bytearray, str]


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


class LineFramer:
    """Split a chunk stream into lines while keeping the trailing partial.

    ``feed`` never drops or duplicates characters: the lines it returns
    (each followed by ``\\n``) plus :attr:`pending` always equal everything
    fed so far, minus one ``\\r`` before each newline.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    @property
    def pending(self) -> str:
        """Buffered text not yet returned as a line."""
        return self._buffer

    def feed(self, chunk: Chunk) -> List[str]:
        """Append ``chunk`` and return every line it completes."""
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        self._buffer += chunk
        *complete, self._buffer = self._buffer.split("\n")
        return [_strip_cr(line) for line in complete]

    def push_back(self, lines: Sequence[str]) -> None:
        """Return ``lines`` to the front of the buffer for a later pass."""
        if lines:
            self._buffer = "".join(f"{line}\n" for line in lines) + self._buffer

    def flush(self) -> List[str]:
        """Drain the buffer at end of stream.

        Returns the remaining lines, including a final partial line that never
        received its newline. The buffer is empty afterwards.
        """
        text = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        if not text:
            return []
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [_strip_cr(line) for line in lines]


__all__ = ["LineFramer", "Chunk"]
