"""Variable-length quantities.

A VLQ stores an integer of at most 28 bits in 1-4 bytes, seven bits per byte,
most-significant group first.  Every byte but the last has bit 7 set.

    0x00000000  00
    0x0000007F  7F
    0x00000080  81 00
    0x00003FFF  FF 7F
    0x00100000  C0 80 00
    0x0FFFFFFF  FF FF FF 7F
"""

from __future__ import annotations

from typing import Tuple, Union

from .errors import NonCanonicalVlq, NotEnoughBytes, VlqOverflow
from .primitives import BoundedInt

MAX_REPRESENTABLE = 0x0FFFFFFF
MAX_BYTES = 4

Buffer = Union[bytes, bytearray, memoryview]


class Vlq(BoundedInt):
    MAX = MAX_REPRESENTABLE
    ERROR = VlqOverflow

    def encode(self) -> bytes:
        """Return the canonical (shortest) encoding."""

        n = int(self)
        out = bytearray([n & 0x7F])
        n >>= 7
        while n:
            out.append(0x80 | (n & 0x7F))
            n >>= 7
        out.reverse()
        return bytes(out)

    @property
    def encoded_size(self) -> int:
        return len(self.encode())

    @classmethod
    def decode(cls, data: Buffer) -> Tuple["Vlq", memoryview]:
        """Decode one VLQ from the front of ``data``.

        The fourth byte always terminates the quantity, whatever its top bit,
        since a fifth group could not fit in 28 bits.  A leading 0x80 byte
        would re-encode shorter, so it is rejected.
        """

        view = memoryview(data)
        value = 0
        for idx in range(MAX_BYTES):
            if idx >= len(view):
                raise NotEnoughBytes("variable-length quantity", idx + 1, len(view))
            byte = view[idx]
            value = (value << 7) | (byte & 0x7F)
            if not byte & 0x80 or idx == MAX_BYTES - 1:
                if idx and view[0] == 0x80:
                    raise NonCanonicalVlq(bytes(view[: idx + 1]))
                return cls(value), view[idx + 1 :]
        raise AssertionError("unreachable")


def encode_vlq(n: int) -> bytes:
    return Vlq(n).encode()


def decode_vlq(data: Buffer) -> Tuple[Vlq, memoryview]:
    return Vlq.decode(data)
