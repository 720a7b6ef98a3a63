"""Range-checked integer types used across the model.

Each type is an ``int`` subclass whose constructor rejects out-of-range
values, so a model holding one never needs to re-validate at encode time.
"""

from __future__ import annotations

from typing import ClassVar, Type

from .errors import Overflow


class BoundedInt(int):
    MIN: ClassVar[int] = 0
    MAX: ClassVar[int] = 0
    ERROR: ClassVar[Type[Overflow]] = Overflow

    def __new__(cls, value: int = 0):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{cls.__name__} requires an int, got {type(value).__name__}")
        if not cls.MIN <= value <= cls.MAX:
            raise cls.ERROR(cls.__name__, value, cls.MIN, cls.MAX)
        return super().__new__(cls, value)


class U7(BoundedInt):
    """A MIDI data byte (0-127)."""

    MAX = 0x7F


class Channel(BoundedInt):
    MAX = 0x0F


class U8(BoundedInt):
    MAX = 0xFF


class U16(BoundedInt):
    MAX = 0xFFFF


class NonZeroU8(BoundedInt):
    MIN = 1
    MAX = 0xFF


class NonZeroU16(BoundedInt):
    MIN = 1
    MAX = 0xFFFF


class Tempo(BoundedInt):
    """Microseconds per quarter note, stored on the wire as 24 bits."""

    MAX = (1 << 24) - 1

    @property
    def bpm(self) -> float:
        if self == 0:
            return float("inf")
        return 60_000_000 / self
