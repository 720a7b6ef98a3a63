"""Standard MIDI File codec: bytes in, validated immutable values out, and back."""

from .chunk import (  # noqa: F401
    ENVELOPE_SIZE,
    Chunk,
    ChunkType,
    frame,
    iter_chunks,
    unframe,
)
from .enums import BackedEnum  # noqa: F401
from .errors import (  # noqa: F401
    ChunkTooLarge,
    DivisionError,
    EventDecodeError,
    InvalidFormat,
    InvalidLength,
    InvalidNumberOfTracks,
    InvalidRunningStatus,
    InvalidValue,
    NonCanonicalVlq,
    NotEnoughBytes,
    Overflow,
    SMFError,
    SMPTETimecodeFormatError,
    TextDecodeError,
    TicksPerFrameMustBeGreaterThanZero,
    TicksPerQuarterNoteMustBeGreaterThanZero,
    TrackCountMismatch,
    TrailingBytes,
    UnexpectedChunkType,
    UnknownChunkType,
    UnrecognizedMetaType,
    UnrecognizedStatus,
    VlqOverflow,
)
from .events import (  # noqa: F401
    ChannelMessage,
    ChannelMode,
    ChannelPrefix,
    ChannelPressure,
    ChannelVoice,
    ControlChange,
    CopyrightNotice,
    CuePoint,
    EndOfTrack,
    Event,
    InstrumentName,
    KeySignature,
    KeyType,
    Lyric,
    Marker,
    MetaMessage,
    MidiPort,
    ModeMessage,
    NoteOff,
    NoteOn,
    PitchBend,
    PolyKeyPressure,
    ProgramChange,
    SequenceName,
    SequenceNumber,
    SequencerSpecificEvent,
    SetTempo,
    SharpsOrFlats,
    SMPTEOffset,
    SysexMessage,
    SysexStatus,
    TextEvent,
    TextMessage,
    TimeSignature,
    VoiceMessage,
    VoiceMessageData,
    decode_event,
    encode_event,
)
from .header import (  # noqa: F401
    Division,
    Format,
    HeaderChunk,
    SMPTETimecodeFormat,
    SubdivisionsOfASecond,
    TicksPerQuarterNote,
    decode_division,
    encode_division,
)
from .midifile import MidiFile  # noqa: F401
from .primitives import U7, U8, U16, Channel, NonZeroU8, NonZeroU16, Tempo  # noqa: F401
from .track import MTrkEvent, TrackChunk, decode_track, encode_track  # noqa: F401
from .vlq import MAX_REPRESENTABLE, Vlq, decode_vlq, encode_vlq  # noqa: F401
