"""Variable-length quantity encoding and decoding."""

from pathlib import Path
import random
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.errors import NonCanonicalVlq, NotEnoughBytes, VlqOverflow  # noqa: E402
from smf.vlq import MAX_REPRESENTABLE, Vlq, decode_vlq, encode_vlq  # noqa: E402


# Values from the Standard MIDI File 1.0 document.
DOCUMENTED_VALUES = [
    (0x00000000, "00"),
    (0x00000040, "40"),
    (0x0000007F, "7F"),
    (0x00000080, "81 00"),
    (0x00002000, "C0 00"),
    (0x00003FFF, "FF 7F"),
    (0x00004000, "81 80 00"),
    (0x00100000, "C0 80 00"),
    (0x001FFFFF, "FF FF 7F"),
    (0x00200000, "81 80 80 00"),
    (0x08000000, "C0 80 80 00"),
    (0x0FFFFFFF, "FF FF FF 7F"),
]


@pytest.mark.parametrize("value,encoded", DOCUMENTED_VALUES, ids=lambda v: str(v))
def test_encode_matches_documented_values(value: int, encoded: str) -> None:
    assert encode_vlq(value) == bytes.fromhex(encoded)


@pytest.mark.parametrize("value,encoded", DOCUMENTED_VALUES, ids=lambda v: str(v))
def test_decode_matches_documented_values(value: int, encoded: str) -> None:
    decoded, rest = decode_vlq(bytes.fromhex(encoded))
    assert decoded == value
    assert len(rest) == 0


def test_decode_returns_remainder() -> None:
    decoded, rest = Vlq.decode(b"\x81\x00\x90\x3C")
    assert decoded == 0x80
    assert bytes(rest) == b"\x90\x3C"


@pytest.mark.parametrize("value", [MAX_REPRESENTABLE + 1, 0xFFFFFFFF, -1])
def test_out_of_range_values_rejected(value: int) -> None:
    with pytest.raises(VlqOverflow):
        Vlq(value)
    with pytest.raises(VlqOverflow):
        encode_vlq(value)


@pytest.mark.parametrize("data", [b"", b"\x80", b"\xFF\xFF", b"\x81\x80\x80"])
def test_truncated_input_raises_not_enough_bytes(data: bytes) -> None:
    with pytest.raises(NotEnoughBytes):
        decode_vlq(data)


def test_fourth_byte_is_always_final() -> None:
    # The continuation bit on the 4th byte is ignored; the 5th byte is untouched.
    decoded, rest = decode_vlq(b"\xFF\xFF\xFF\xFF\x42")
    assert decoded == MAX_REPRESENTABLE
    assert bytes(rest) == b"\x42"


@pytest.mark.parametrize("data", ["80 00", "80 7F", "80 81 00", "80 80 80 00", "80 80 80 80"])
def test_padded_encoding_rejected(data: str) -> None:
    with pytest.raises(NonCanonicalVlq) as excinfo:
        decode_vlq(bytes.fromhex(data) + b"\x42")
    assert excinfo.value.encoded == bytes.fromhex(data)


def test_leading_zero_byte_alone_is_canonical() -> None:
    decoded, rest = decode_vlq(b"\x00\x80")
    assert decoded == 0
    assert bytes(rest) == b"\x80"


def test_round_trip_boundaries() -> None:
    for bits in range(0, 29):
        for value in {(1 << bits) - 1, 1 << bits}:
            if value > MAX_REPRESENTABLE:
                continue
            encoded = encode_vlq(value)
            assert decode_vlq(encoded)[0] == value
            assert len(encoded) == max(1, (value.bit_length() + 6) // 7)


def test_round_trip_random_values() -> None:
    rng = random.Random(0x5EED)
    for _ in range(5000):
        value = rng.randint(0, MAX_REPRESENTABLE)
        encoded = Vlq(value).encode()
        assert 1 <= len(encoded) <= 4
        assert all(b & 0x80 for b in encoded[:-1])
        assert not encoded[-1] & 0x80
        assert decode_vlq(encoded)[0] == value


def test_vlq_is_an_int() -> None:
    assert Vlq(300) == 300
    assert Vlq(300) + 1 == 301
    assert Vlq(300).encoded_size == 2
