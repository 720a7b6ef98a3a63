"""Closed enumerations and range-checked primitives."""

import pytest

from smf.enums import BackedEnum
from smf.errors import InvalidValue, Overflow
from smf.events import KeyType, ModeMessage, SharpsOrFlats, SysexStatus, VoiceMessage
from smf.header import Format, SMPTETimecodeFormat
from smf.primitives import U7, U8, U16, Channel, NonZeroU8, NonZeroU16, Tempo


ALL_ENUMS = [
    Format,
    SMPTETimecodeFormat,
    VoiceMessage,
    ModeMessage,
    KeyType,
    SharpsOrFlats,
    SysexStatus,
]

EXPECTED_DOMAINS = {
    Format: {0, 1, 2},
    SMPTETimecodeFormat: {-24, -25, -29, -30},
    VoiceMessage: {0x80, 0x90, 0xA0, 0xB0, 0xC0, 0xD0, 0xE0},
    ModeMessage: set(range(120, 128)),
    KeyType: {0, 1},
    SharpsOrFlats: set(range(-7, 8)),
    SysexStatus: {0xF0, 0xF7},
}


@pytest.mark.parametrize("enum_cls", ALL_ENUMS, ids=lambda c: c.__name__)
def test_decode_and_encode_are_inverse_over_domain(enum_cls) -> None:
    assert issubclass(enum_cls, BackedEnum)
    assert {member.encode() for member in enum_cls} == EXPECTED_DOMAINS[enum_cls]
    for member in enum_cls:
        assert enum_cls.decode(member.encode()) is member


@pytest.mark.parametrize("enum_cls", ALL_ENUMS, ids=lambda c: c.__name__)
def test_decode_rejects_everything_else(enum_cls) -> None:
    domain = EXPECTED_DOMAINS[enum_cls]
    for value in range(-256, 256):
        if value in domain:
            continue
        with pytest.raises(InvalidValue) as excinfo:
            enum_cls.decode(value)
        assert excinfo.value.enum_name == enum_cls.__name__
        assert excinfo.value.value == value


@pytest.mark.parametrize(
    "kind,low,high",
    [
        (U7, 0, 127),
        (Channel, 0, 15),
        (U8, 0, 255),
        (U16, 0, 0xFFFF),
        (NonZeroU8, 1, 255),
        (NonZeroU16, 1, 0xFFFF),
        (Tempo, 0, 0xFFFFFF),
    ],
    ids=lambda v: getattr(v, "__name__", str(v)),
)
def test_primitive_bounds(kind, low: int, high: int) -> None:
    assert kind(low) == low
    assert kind(high) == high
    with pytest.raises(Overflow):
        kind(low - 1)
    with pytest.raises(Overflow):
        kind(high + 1)


def test_primitives_reject_non_integers() -> None:
    with pytest.raises(TypeError):
        U7(1.0)
    with pytest.raises(TypeError):
        U7(True)


def test_overflow_is_a_value_error() -> None:
    with pytest.raises(ValueError, match=r"U7 must be in \[0, 127\], got 128"):
        U7(128)


def test_tempo_bpm() -> None:
    assert Tempo(500_000).bpm == pytest.approx(120.0)
