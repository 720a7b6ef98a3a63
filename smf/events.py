"""Track events: channel, system-exclusive and meta messages.

Wire layouts (after the delta-time):

  Channel voice   <8n-En> <data byte> [<data byte>]        data bytes <= 0x7F
  Channel mode    <Bn> <120-127> <value>
  Sysex           <F0|F7> <VLQ length> <raw bytes>
  Meta            <FF> <type> <VLQ length> <payload>

The low nibble ``n`` of a channel status byte is the channel.  Control Change
messages whose controller number is 120 or above are channel mode messages
and decode to :class:`ChannelMode` instead of :class:`ChannelVoice`.

Fixed-size meta events (SequenceNumber, ChannelPrefix, MidiPort, EndOfTrack,
SetTempo, SMPTEOffset, TimeSignature, KeySignature) must carry exactly their
documented length.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import unique
from typing import ClassVar, Dict, Optional, Tuple, Type, Union

from .enums import BackedEnum
from .errors import (
    InvalidLength,
    NotEnoughBytes,
    Overflow,
    SMFError,
    TextDecodeError,
    UnrecognizedMetaType,
    UnrecognizedStatus,
    VlqOverflow,
    with_field,
)
from .primitives import U7, U8, U16, Channel, Tempo
from .vlq import MAX_REPRESENTABLE, Buffer, Vlq

META_STATUS = 0xFF
FIRST_MODE_CONTROLLER = 120


@unique
class VoiceMessage(BackedEnum):
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    POLY_KEY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0


@unique
class ModeMessage(BackedEnum):
    ALL_SOUND_OFF = 120
    RESET_ALL_CONTROLLERS = 121
    LOCAL_CONTROL = 122
    ALL_NOTES_OFF = 123
    OMNI_OFF = 124
    OMNI_ON = 125
    MONO = 126
    POLY = 127


@unique
class SysexStatus(BackedEnum):
    START = 0xF0
    ESCAPE = 0xF7


@unique
class KeyType(BackedEnum):
    MAJOR = 0
    MINOR = 1


@unique
class SharpsOrFlats(BackedEnum):
    SEVEN_FLATS = -7
    SIX_FLATS = -6
    FIVE_FLATS = -5
    FOUR_FLATS = -4
    THREE_FLATS = -3
    TWO_FLATS = -2
    ONE_FLAT = -1
    NONE = 0
    ONE_SHARP = 1
    TWO_SHARPS = 2
    THREE_SHARPS = 3
    FOUR_SHARPS = 4
    FIVE_SHARPS = 5
    SIX_SHARPS = 6
    SEVEN_SHARPS = 7


def _coerce(obj: object, name: str, kind: type) -> None:
    """Validate ``obj.name`` as ``kind`` and store the converted value."""

    value = getattr(obj, name)
    try:
        if isinstance(kind, type) and issubclass(kind, BackedEnum):
            converted = kind.decode(value)
        else:
            converted = kind(value)
    except SMFError as exc:
        raise with_field(exc, f"{type(obj).__name__}.{name}")
    object.__setattr__(obj, name, converted)


def _coerce_blob(obj: object, name: str) -> None:
    value = bytes(getattr(obj, name))
    if len(value) > MAX_REPRESENTABLE:
        raise with_field(
            VlqOverflow("length", len(value), 0, MAX_REPRESENTABLE),
            f"{type(obj).__name__}.{name}",
        )
    object.__setattr__(obj, name, value)


def _length_prefixed(payload: bytes) -> bytes:
    return Vlq(len(payload)).encode() + payload


class _Variants:
    """Base for model classes that only exist to be subclassed.

    A class that sets ``_BASE = True`` in its own body cannot be
    instantiated; its subclasses can.
    """

    def __new__(cls, *args, **kwargs):
        if cls.__dict__.get("_BASE"):
            raise TypeError(f"{cls.__name__} is a base class; instantiate one of its variants")
        return super().__new__(cls)


# ---------------------------------------------------------------------------
# Channel messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VoiceMessageData(_Variants):
    """Data bytes of a channel voice message; every field is a U7."""

    _BASE = True
    KIND: ClassVar[VoiceMessage]

    def __post_init__(self) -> None:
        for f in fields(self):
            _coerce(self, f.name, U7)

    @classmethod
    def data_size(cls) -> int:
        return len(fields(cls))

    def data_bytes(self) -> bytes:
        return bytes(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class NoteOff(VoiceMessageData):
    KIND = VoiceMessage.NOTE_OFF
    note: U7
    velocity: U7


@dataclass(frozen=True)
class NoteOn(VoiceMessageData):
    KIND = VoiceMessage.NOTE_ON
    note: U7
    velocity: U7


@dataclass(frozen=True)
class PolyKeyPressure(VoiceMessageData):
    KIND = VoiceMessage.POLY_KEY_PRESSURE
    note: U7
    pressure: U7


@dataclass(frozen=True)
class ControlChange(VoiceMessageData):
    KIND = VoiceMessage.CONTROL_CHANGE
    controller: U7
    value: U7

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.controller >= FIRST_MODE_CONTROLLER:
            # 120-127 are channel mode messages
            raise with_field(
                Overflow("controller", self.controller, 0, FIRST_MODE_CONTROLLER - 1),
                "ControlChange.controller",
            )


@dataclass(frozen=True)
class ProgramChange(VoiceMessageData):
    KIND = VoiceMessage.PROGRAM_CHANGE
    program: U7


@dataclass(frozen=True)
class ChannelPressure(VoiceMessageData):
    KIND = VoiceMessage.CHANNEL_PRESSURE
    pressure: U7


@dataclass(frozen=True)
class PitchBend(VoiceMessageData):
    KIND = VoiceMessage.PITCH_BEND
    lsb: U7
    msb: U7

    CENTER: ClassVar[int] = 0x2000

    @property
    def value(self) -> int:
        """The 14-bit bend amount; 0x2000 is centered."""

        return (self.msb << 7) | self.lsb

    @classmethod
    def from_value(cls, value: int) -> "PitchBend":
        if not 0 <= value <= 0x3FFF:
            raise with_field(Overflow("value", value, 0, 0x3FFF), "PitchBend.value")
        return cls(lsb=value & 0x7F, msb=value >> 7)


VOICE_DATA_TYPES: Dict[VoiceMessage, Type[VoiceMessageData]] = {
    cls.KIND: cls
    for cls in (
        NoteOff,
        NoteOn,
        PolyKeyPressure,
        ControlChange,
        ProgramChange,
        ChannelPressure,
        PitchBend,
    )
}


@dataclass(frozen=True)
class ChannelMessage(_Variants):
    _BASE = True
    channel: Channel

    def __post_init__(self) -> None:
        _coerce(self, "channel", Channel)

    @property
    def status(self) -> int:
        raise NotImplementedError

    def data_bytes(self) -> bytes:
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        return bytes([self.status]) + self.data_bytes()


@dataclass(frozen=True)
class ChannelVoice(ChannelMessage):
    data: VoiceMessageData

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.data, VoiceMessageData):
            raise TypeError(f"data must be VoiceMessageData, got {type(self.data).__name__}")

    @property
    def kind(self) -> VoiceMessage:
        return self.data.KIND

    @property
    def status(self) -> int:
        return self.data.KIND.encode() | self.channel

    def data_bytes(self) -> bytes:
        return self.data.data_bytes()


@dataclass(frozen=True)
class ChannelMode(ChannelMessage):
    """A Control Change message addressed to controllers 120-127."""

    mode: ModeMessage
    value: U7 = U7(0)

    def __post_init__(self) -> None:
        super().__post_init__()
        _coerce(self, "mode", ModeMessage)
        _coerce(self, "value", U7)

    @property
    def status(self) -> int:
        return VoiceMessage.CONTROL_CHANGE.encode() | self.channel

    def data_bytes(self) -> bytes:
        return bytes([self.mode.encode(), self.value])


def is_channel_status(status: int) -> bool:
    return 0x80 <= status < 0xF0


def _decode_channel(status: int, data: memoryview) -> Tuple[ChannelMessage, memoryview]:
    kind = VoiceMessage.decode(status & 0xF0)
    channel = status & 0x0F
    data_cls = VOICE_DATA_TYPES[kind]
    names = [f.name for f in fields(data_cls)]
    size = len(names)
    if len(data) < size:
        raise NotEnoughBytes(f"{data_cls.__name__} data", size, len(data))
    raw = bytes(data[:size])
    for name, byte in zip(names, raw):
        if byte > U7.MAX:
            raise with_field(Overflow(name, byte, 0, U7.MAX), f"{data_cls.__name__}.{name}")

    message: ChannelMessage
    if kind is VoiceMessage.CONTROL_CHANGE and raw[0] >= FIRST_MODE_CONTROLLER:
        message = ChannelMode(channel, ModeMessage.decode(raw[0]), raw[1])
    else:
        message = ChannelVoice(channel, data_cls(*raw))
    return message, data[size:]


# ---------------------------------------------------------------------------
# System exclusive
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SysexMessage:
    """A sysex packet; ``data`` is everything after the length, F7 included."""

    data: bytes
    status: SysexStatus = SysexStatus.START

    def __post_init__(self) -> None:
        _coerce_blob(self, "data")
        _coerce(self, "status", SysexStatus)

    @property
    def length(self) -> Vlq:
        return Vlq(len(self.data))

    @property
    def is_complete(self) -> bool:
        return self.data.endswith(b"\xF7")

    def to_bytes(self) -> bytes:
        return bytes([self.status.encode()]) + _length_prefixed(self.data)


def _decode_sysex(status: int, data: memoryview) -> Tuple[SysexMessage, memoryview]:
    length, rest = Vlq.decode(data)
    if len(rest) < length:
        raise NotEnoughBytes("sysex data", length, len(rest))
    return SysexMessage(bytes(rest[:length]), SysexStatus.decode(status)), rest[length:]


# ---------------------------------------------------------------------------
# Meta messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetaMessage(_Variants):
    _BASE = True
    META_TYPE: ClassVar[int]
    FIXED_SIZE: ClassVar[Optional[int]] = None

    def payload(self) -> bytes:
        raise NotImplementedError

    @classmethod
    def _parse(cls, payload: bytes) -> "MetaMessage":
        raise NotImplementedError

    @classmethod
    def from_payload(cls, payload: bytes) -> "MetaMessage":
        if cls.FIXED_SIZE is not None and len(payload) != cls.FIXED_SIZE:
            raise with_field(
                InvalidLength(f"{cls.__name__} payload", cls.FIXED_SIZE, len(payload)),
                cls.__name__,
            )
        return cls._parse(payload)

    def to_bytes(self) -> bytes:
        return bytes([META_STATUS, self.META_TYPE]) + _length_prefixed(self.payload())


@dataclass(frozen=True)
class SequenceNumber(MetaMessage):
    META_TYPE = 0x00
    FIXED_SIZE = 2
    number: U16

    def __post_init__(self) -> None:
        _coerce(self, "number", U16)

    def payload(self) -> bytes:
        return self.number.to_bytes(2, "big")

    @classmethod
    def _parse(cls, payload: bytes) -> "SequenceNumber":
        return cls(int.from_bytes(payload, "big"))


@dataclass(frozen=True)
class TextMessage(MetaMessage):
    _BASE = True
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"{type(self).__name__}.text must be str")
        size = len(self.text.encode("utf-8"))
        if size > MAX_REPRESENTABLE:
            raise with_field(
                VlqOverflow("length", size, 0, MAX_REPRESENTABLE), f"{type(self).__name__}.text"
            )

    def payload(self) -> bytes:
        return self.text.encode("utf-8")

    @classmethod
    def _parse(cls, payload: bytes) -> "TextMessage":
        try:
            return cls(payload.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise TextDecodeError(f"{cls.__name__}.text", exc.reason) from exc


@dataclass(frozen=True)
class TextEvent(TextMessage):
    META_TYPE = 0x01


@dataclass(frozen=True)
class CopyrightNotice(TextMessage):
    META_TYPE = 0x02


@dataclass(frozen=True)
class SequenceName(TextMessage):
    META_TYPE = 0x03


@dataclass(frozen=True)
class InstrumentName(TextMessage):
    META_TYPE = 0x04


@dataclass(frozen=True)
class Lyric(TextMessage):
    META_TYPE = 0x05


@dataclass(frozen=True)
class Marker(TextMessage):
    META_TYPE = 0x06


@dataclass(frozen=True)
class CuePoint(TextMessage):
    META_TYPE = 0x07


@dataclass(frozen=True)
class ChannelPrefix(MetaMessage):
    META_TYPE = 0x20
    FIXED_SIZE = 1
    channel: Channel

    def __post_init__(self) -> None:
        _coerce(self, "channel", Channel)

    def payload(self) -> bytes:
        return bytes([self.channel])

    @classmethod
    def _parse(cls, payload: bytes) -> "ChannelPrefix":
        return cls(payload[0])


@dataclass(frozen=True)
class MidiPort(MetaMessage):
    META_TYPE = 0x21
    FIXED_SIZE = 1
    port: U7

    def __post_init__(self) -> None:
        _coerce(self, "port", U7)

    def payload(self) -> bytes:
        return bytes([self.port])

    @classmethod
    def _parse(cls, payload: bytes) -> "MidiPort":
        return cls(payload[0])


@dataclass(frozen=True)
class EndOfTrack(MetaMessage):
    META_TYPE = 0x2F
    FIXED_SIZE = 0

    def payload(self) -> bytes:
        return b""

    @classmethod
    def _parse(cls, payload: bytes) -> "EndOfTrack":
        return cls()


@dataclass(frozen=True)
class SetTempo(MetaMessage):
    META_TYPE = 0x51
    FIXED_SIZE = 3
    tempo: Tempo

    def __post_init__(self) -> None:
        _coerce(self, "tempo", Tempo)

    def payload(self) -> bytes:
        return self.tempo.to_bytes(3, "big")

    @classmethod
    def _parse(cls, payload: bytes) -> "SetTempo":
        return cls(int.from_bytes(payload, "big"))


@dataclass(frozen=True)
class SMPTEOffset(MetaMessage):
    META_TYPE = 0x54
    FIXED_SIZE = 5
    hour: U8
    minute: U8
    second: U8
    frame: U8
    hundredths_of_a_frame: U8

    def __post_init__(self) -> None:
        for f in fields(self):
            _coerce(self, f.name, U8)

    def payload(self) -> bytes:
        return bytes(getattr(self, f.name) for f in fields(self))

    @classmethod
    def _parse(cls, payload: bytes) -> "SMPTEOffset":
        return cls(*payload)


@dataclass(frozen=True)
class TimeSignature(MetaMessage):
    META_TYPE = 0x58
    FIXED_SIZE = 4
    numerator: U8
    # negative power of two: 2 -> quarter note, 3 -> eighth note
    denominator: U8
    clocks_per_click: U8
    thirty_seconds_per_quarter: U8

    def __post_init__(self) -> None:
        for f in fields(self):
            _coerce(self, f.name, U8)

    def payload(self) -> bytes:
        return bytes(getattr(self, f.name) for f in fields(self))

    @classmethod
    def _parse(cls, payload: bytes) -> "TimeSignature":
        return cls(*payload)


@dataclass(frozen=True)
class KeySignature(MetaMessage):
    META_TYPE = 0x59
    FIXED_SIZE = 2
    sharps_or_flats: SharpsOrFlats
    key_type: KeyType

    def __post_init__(self) -> None:
        _coerce(self, "sharps_or_flats", SharpsOrFlats)
        _coerce(self, "key_type", KeyType)

    def payload(self) -> bytes:
        return bytes([self.sharps_or_flats.encode() & 0xFF, self.key_type.encode()])

    @classmethod
    def _parse(cls, payload: bytes) -> "KeySignature":
        signed = payload[0] - 0x100 if payload[0] & 0x80 else payload[0]
        return cls(signed, payload[1])


@dataclass(frozen=True)
class SequencerSpecificEvent(MetaMessage):
    META_TYPE = 0x7F
    data: bytes

    def __post_init__(self) -> None:
        _coerce_blob(self, "data")

    def payload(self) -> bytes:
        return self.data

    @classmethod
    def _parse(cls, payload: bytes) -> "SequencerSpecificEvent":
        return cls(payload)


META_TYPES: Dict[int, Type[MetaMessage]] = {
    cls.META_TYPE: cls
    for cls in (
        SequenceNumber,
        TextEvent,
        CopyrightNotice,
        SequenceName,
        InstrumentName,
        Lyric,
        Marker,
        CuePoint,
        ChannelPrefix,
        MidiPort,
        EndOfTrack,
        SetTempo,
        SMPTEOffset,
        TimeSignature,
        KeySignature,
        SequencerSpecificEvent,
    )
}


def _decode_meta(data: memoryview) -> Tuple[MetaMessage, memoryview]:
    if not len(data):
        raise NotEnoughBytes("meta event type", 1, 0)
    meta_type = data[0]
    meta_cls = META_TYPES.get(meta_type)
    if meta_cls is None:
        raise UnrecognizedMetaType(meta_type)
    length, rest = Vlq.decode(data[1:])
    if len(rest) < length:
        raise NotEnoughBytes(f"{meta_cls.__name__} payload", length, len(rest))
    return meta_cls.from_payload(bytes(rest[:length])), rest[length:]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Event = Union[ChannelMessage, SysexMessage, MetaMessage]


def decode_event(
    data: Buffer, running_status: Optional[int] = None
) -> Tuple[Event, memoryview]:
    """Decode one event from the front of ``data``.

    ``running_status`` is the status byte of the previous channel message, if
    any; when given, a leading data byte (< 0x80) is read as the first data
    byte of a message reusing that status.
    """

    view = memoryview(data)
    if not len(view):
        raise NotEnoughBytes("event status", 1, 0)
    status = view[0]
    if status == META_STATUS:
        return _decode_meta(view[1:])
    if status in (SysexStatus.START, SysexStatus.ESCAPE):
        return _decode_sysex(status, view[1:])
    if is_channel_status(status):
        return _decode_channel(status, view[1:])
    if status < 0x80 and running_status is not None and is_channel_status(running_status):
        return _decode_channel(running_status, view)
    raise UnrecognizedStatus(status)


def encode_event(event: Event) -> bytes:
    return event.to_bytes()
