"""DTO package for streamed payloads."""

from .completion_chunk import ChunkDelta, ChunkChoice, CompletionChunk

__all__ = [
    "ChunkDelta",
    "ChunkChoice",
    "CompletionChunk",
]
