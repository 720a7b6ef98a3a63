"""Exception hierarchy for the SMF codec.

Every decode or validation failure raises a subclass of :class:`SMFError`,
which is itself a ``ValueError`` so callers that only care about "bad input"
can keep catching that.  Errors raised deep inside an event are re-raised by
the track codec as :class:`EventDecodeError` with the original exception
chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Optional


class SMFError(ValueError):
    """Base class for all codec errors."""

    field: Optional[str] = None


class NotEnoughBytes(SMFError):
    def __init__(self, what: str, needed: int, available: int) -> None:
        super().__init__(
            f"not enough bytes for {what}: need {needed}, have {available}"
        )
        self.what = what
        self.needed = needed
        self.available = available


class InvalidValue(SMFError):
    """An integer outside a closed enumeration."""

    def __init__(self, enum_name: str, value: int) -> None:
        super().__init__(f"invalid {enum_name} value {value!r}")
        self.enum_name = enum_name
        self.value = value


class Overflow(SMFError):
    """An integer outside the range of a primitive type."""

    def __init__(self, name: str, value: int, minimum: int, maximum: int) -> None:
        super().__init__(f"{name} must be in [{minimum}, {maximum}], got {value!r}")
        self.name = name
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class VlqOverflow(Overflow):
    pass


class NonCanonicalVlq(SMFError):
    """A variable-length quantity padded with leading zero groups."""

    def __init__(self, encoded: bytes) -> None:
        super().__init__(
            f"variable-length quantity {encoded.hex(' ')} has redundant leading 0x80 bytes"
        )
        self.encoded = encoded


# --- chunk envelope ---


class UnknownChunkType(SMFError):
    def __init__(self, tag: bytes) -> None:
        super().__init__(f"unknown chunk type {bytes(tag)!r}")
        self.tag = bytes(tag)


class UnexpectedChunkType(SMFError):
    def __init__(self, expected: bytes, found: bytes) -> None:
        super().__init__(f"expected {expected!r} chunk, found {found!r}")
        self.expected = expected
        self.found = found


class ChunkTooLarge(SMFError):
    def __init__(self, size: int) -> None:
        super().__init__(f"chunk payload of {size} bytes does not fit a 32-bit length")
        self.size = size


class InvalidLength(SMFError):
    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(f"{what} length must be {expected}, got {actual}")
        self.what = what
        self.expected = expected
        self.actual = actual


# --- header chunk ---


class InvalidFormat(SMFError):
    def __init__(self, value: int) -> None:
        super().__init__(f"invalid header format {value}")
        self.value = value


class InvalidNumberOfTracks(SMFError):
    def __init__(self) -> None:
        super().__init__("header must declare at least one track")


class DivisionError(SMFError):
    pass


class TicksPerQuarterNoteMustBeGreaterThanZero(DivisionError):
    def __init__(self) -> None:
        super().__init__("ticks per quarter note must be greater than zero")


class TicksPerFrameMustBeGreaterThanZero(DivisionError):
    def __init__(self) -> None:
        super().__init__("ticks per frame must be greater than zero")


class SMPTETimecodeFormatError(DivisionError):
    def __init__(self, value: int) -> None:
        super().__init__(f"invalid SMPTE timecode format {value}")
        self.value = value


# --- events ---


class UnrecognizedStatus(SMFError):
    def __init__(self, status: int) -> None:
        super().__init__(f"unrecognized status byte 0x{status:02X}")
        self.status = status


class UnrecognizedMetaType(SMFError):
    def __init__(self, meta_type: int) -> None:
        super().__init__(f"unrecognized meta event type 0x{meta_type:02X}")
        self.meta_type = meta_type


class TextDecodeError(SMFError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: text is not valid UTF-8 ({reason})")
        self.field = field


class InvalidRunningStatus(SMFError):
    def __init__(self, index: Optional[int], reason: str) -> None:
        super().__init__(reason if index is None else f"event {index}: {reason}")
        self.index = index


# --- track / file ---


class EventDecodeError(SMFError):
    """Wraps a failure while decoding the ``index``-th event of a track."""

    def __init__(self, index: int, offset: int, cause: SMFError) -> None:
        where = f" in {cause.field}" if cause.field else ""
        super().__init__(f"event {index} at payload offset {offset}{where}: {cause}")
        self.index = index
        self.offset = offset
        self.cause = cause
        self.field = cause.field


class TrackCountMismatch(SMFError):
    def __init__(self, declared: int, found: int) -> None:
        super().__init__(f"header declares {declared} tracks, found {found}")
        self.declared = declared
        self.found = found


class TrailingBytes(SMFError):
    def __init__(self, count: int) -> None:
        super().__init__(f"{count} trailing bytes after last chunk")
        self.count = count


def with_field(exc: SMFError, field: str) -> SMFError:
    """Tag ``exc`` with the model field it was raised for, keeping any inner tag."""

    if exc.field is None:
        exc.field = field
    return exc
