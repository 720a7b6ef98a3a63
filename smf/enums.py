"""Closed integer-backed enumerations.

Each concrete enum lists its legal wire values once; :meth:`BackedEnum.decode`
is the only way bytes become members, so decode and encode cannot drift apart.
"""

from __future__ import annotations

from enum import IntEnum

from .errors import InvalidValue


class BackedEnum(IntEnum):
    """An ``IntEnum`` with an exhaustive, failing decode."""

    @classmethod
    def decode(cls, value: int):
        try:
            return cls(value)
        except ValueError:
            raise InvalidValue(cls.__name__, value) from None

    def encode(self) -> int:
        return int(self)
