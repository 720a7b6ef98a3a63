"""Chunk envelope shared by every SMF chunk.

    +--------+----------------+-------------------+
    | tag 4B | length u32 BE  | payload (length)  |
    +--------+----------------+-------------------+

Only ``MThd`` and ``MTrk`` are recognized; anything else is an error rather
than being skipped.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import Enum, unique
from typing import Iterator, Tuple

from .errors import ChunkTooLarge, NotEnoughBytes, UnknownChunkType
from .vlq import Buffer

logger = logging.getLogger(__name__)

ENVELOPE_SIZE = 8
MAX_PAYLOAD_SIZE = 0xFFFFFFFF

_LENGTH = struct.Struct(">I")


@unique
class ChunkType(Enum):
    HEADER = b"MThd"
    TRACK = b"MTrk"

    @classmethod
    def decode(cls, tag: Buffer) -> "ChunkType":
        tag = bytes(tag)
        try:
            return cls(tag)
        except ValueError:
            raise UnknownChunkType(tag) from None


def frame(chunk_type: ChunkType, payload: Buffer) -> bytes:
    size = len(payload)
    if size > MAX_PAYLOAD_SIZE:
        raise ChunkTooLarge(size)
    return chunk_type.value + _LENGTH.pack(size) + bytes(payload)


def unframe(data: Buffer) -> Tuple[ChunkType, memoryview, memoryview]:
    """Split one chunk off the front of ``data``.

    Returns ``(chunk_type, payload, remainder)``; the payload and remainder
    are views into ``data``.
    """

    view = memoryview(data)
    if len(view) < ENVELOPE_SIZE:
        raise NotEnoughBytes("chunk envelope", ENVELOPE_SIZE, len(view))
    chunk_type = ChunkType.decode(view[:4])
    (length,) = _LENGTH.unpack_from(view, 4)
    end = ENVELOPE_SIZE + length
    if len(view) < end:
        raise NotEnoughBytes(
            f"{chunk_type.value.decode('ascii')} payload", length, len(view) - ENVELOPE_SIZE
        )
    logger.debug("unframed %s chunk, %d payload bytes", chunk_type.name, length)
    return chunk_type, view[ENVELOPE_SIZE:end], view[end:]


@dataclass(frozen=True)
class Chunk:
    """A raw chunk: its type and undecoded payload."""

    type: ChunkType
    payload: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", bytes(self.payload))
        if len(self.payload) > MAX_PAYLOAD_SIZE:
            raise ChunkTooLarge(len(self.payload))

    @property
    def length(self) -> int:
        return len(self.payload)

    @classmethod
    def from_bytes(cls, data: Buffer) -> Tuple["Chunk", memoryview]:
        chunk_type, payload, rest = unframe(data)
        return cls(type=chunk_type, payload=bytes(payload)), rest

    def to_bytes(self) -> bytes:
        return frame(self.type, self.payload)


def iter_chunks(data: Buffer) -> Iterator[Chunk]:
    """Yield every chunk in ``data`` until it is exhausted."""

    rest = memoryview(data)
    while len(rest):
        chunk, rest = Chunk.from_bytes(rest)
        yield chunk
