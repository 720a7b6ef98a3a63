"""Header chunk (``MThd``).

Payload layout (always 6 bytes, big-endian):

    0x00  u16  format      0, 1 or 2
    0x02  u16  ntrks       > 0
    0x04  u16  division

Division has two layouts selected by bit 15:

    0ttttttt tttttttt   ticks per quarter note (15 bits, non-zero)
    1fffffff pppppppp   SMPTE: f = negative frame rate as a signed byte
                        (-24, -25, -29, -30), p = ticks per frame (non-zero)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import unique
from typing import Tuple, Union

from .chunk import ChunkType, frame, unframe
from .enums import BackedEnum
from .errors import (
    InvalidFormat,
    InvalidLength,
    InvalidNumberOfTracks,
    InvalidValue,
    Overflow,
    SMPTETimecodeFormatError,
    TicksPerFrameMustBeGreaterThanZero,
    TicksPerQuarterNoteMustBeGreaterThanZero,
    UnexpectedChunkType,
)
from .primitives import NonZeroU8, NonZeroU16
from .vlq import Buffer

HEADER_PAYLOAD_SIZE = 6
MARKER_BIT = 0x8000
TICKS_PER_QUARTER_NOTE_MASK = 0x7FFF

_PAYLOAD = struct.Struct(">HHH")


@unique
class Format(BackedEnum):
    SINGLE_MULTI_CHANNEL_TRACK = 0
    ONE_OR_MORE_SIMULTANEOUS_TRACKS = 1
    ONE_OR_MORE_INDEPENDENT_TRACKS = 2


@unique
class SMPTETimecodeFormat(BackedEnum):
    NEG_TWENTY_FOUR = -24
    NEG_TWENTY_FIVE = -25
    NEG_TWENTY_NINE = -29
    NEG_THIRTY = -30

    @property
    def frames_per_second(self) -> float:
        if self is SMPTETimecodeFormat.NEG_TWENTY_NINE:
            return 29.97
        return float(-self.value)


@dataclass(frozen=True)
class TicksPerQuarterNote:
    ticks: NonZeroU16

    def __post_init__(self) -> None:
        try:
            ticks = NonZeroU16(self.ticks)
        except Overflow:
            if self.ticks == 0:
                raise TicksPerQuarterNoteMustBeGreaterThanZero() from None
            raise
        if ticks & MARKER_BIT:
            raise Overflow("TicksPerQuarterNote.ticks", ticks, 1, TICKS_PER_QUARTER_NOTE_MASK)
        object.__setattr__(self, "ticks", ticks)

    def encode(self) -> int:
        return int(self.ticks)


@dataclass(frozen=True)
class SubdivisionsOfASecond:
    timecode_format: SMPTETimecodeFormat
    ticks_per_frame: NonZeroU8

    def __post_init__(self) -> None:
        if self.ticks_per_frame == 0:
            raise TicksPerFrameMustBeGreaterThanZero()
        if not isinstance(self.timecode_format, SMPTETimecodeFormat):
            object.__setattr__(
                self, "timecode_format", _decode_timecode_format(self.timecode_format)
            )
        object.__setattr__(self, "ticks_per_frame", NonZeroU8(self.ticks_per_frame))

    def encode(self) -> int:
        high = self.timecode_format.value & 0xFF
        return MARKER_BIT | (high << 8) | int(self.ticks_per_frame)


Division = Union[TicksPerQuarterNote, SubdivisionsOfASecond]


def _decode_timecode_format(value: int) -> SMPTETimecodeFormat:
    try:
        return SMPTETimecodeFormat.decode(value)
    except InvalidValue:
        raise SMPTETimecodeFormatError(value) from None


def decode_division(word: int) -> Division:
    if not word & MARKER_BIT:
        ticks = word & TICKS_PER_QUARTER_NOTE_MASK
        if ticks == 0:
            raise TicksPerQuarterNoteMustBeGreaterThanZero()
        return TicksPerQuarterNote(ticks)

    ticks_per_frame = word & 0xFF
    if ticks_per_frame == 0:
        raise TicksPerFrameMustBeGreaterThanZero()
    high = (word >> 8) & 0xFF
    signed_high = high - 0x100 if high & 0x80 else high
    timecode_format = _decode_timecode_format(signed_high)
    return SubdivisionsOfASecond(timecode_format, ticks_per_frame)


def encode_division(division: Division) -> int:
    return division.encode()


@dataclass(frozen=True)
class HeaderChunk:
    format: Format
    ntrks: NonZeroU16
    division: Division

    def __post_init__(self) -> None:
        if not isinstance(self.format, Format):
            try:
                object.__setattr__(self, "format", Format.decode(self.format))
            except InvalidValue:
                raise InvalidFormat(self.format) from None
        if self.ntrks == 0:
            raise InvalidNumberOfTracks()
        object.__setattr__(self, "ntrks", NonZeroU16(self.ntrks))
        if not isinstance(self.division, (TicksPerQuarterNote, SubdivisionsOfASecond)):
            raise TypeError(f"division must be a Division, got {type(self.division).__name__}")

    @classmethod
    def from_payload(cls, payload: Buffer) -> "HeaderChunk":
        if len(payload) != HEADER_PAYLOAD_SIZE:
            raise InvalidLength("header chunk payload", HEADER_PAYLOAD_SIZE, len(payload))
        format_word, ntrks, division_word = _PAYLOAD.unpack(bytes(payload))
        try:
            fmt = Format.decode(format_word)
        except InvalidValue:
            raise InvalidFormat(format_word) from None
        if ntrks == 0:
            raise InvalidNumberOfTracks()
        return cls(format=fmt, ntrks=ntrks, division=decode_division(division_word))

    @classmethod
    def from_bytes(cls, data: Buffer) -> Tuple["HeaderChunk", memoryview]:
        chunk_type, payload, rest = unframe(data)
        if chunk_type is not ChunkType.HEADER:
            raise UnexpectedChunkType(ChunkType.HEADER.value, chunk_type.value)
        return cls.from_payload(payload), rest

    def to_payload(self) -> bytes:
        return _PAYLOAD.pack(self.format.encode(), int(self.ntrks), self.division.encode())

    def to_bytes(self) -> bytes:
        return frame(ChunkType.HEADER, self.to_payload())
