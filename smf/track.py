"""Track chunk (``MTrk``): a sequence of (delta-time, event) pairs.

The payload is decoded until it is exhausted; EndOfTrack is not treated as a
terminator.  Any event that runs past the payload, or any trailing bytes that
do not form a complete event, is an error.

Running status: a channel message may omit its status byte when it equals the
status of the previous channel message.  Sysex events cancel running status,
meta events leave it untouched.  Each decoded event records whether its
status byte was omitted so that re-encoding reproduces the input exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from .chunk import ChunkType, frame, unframe
from .errors import (
    EventDecodeError,
    InvalidRunningStatus,
    SMFError,
    UnexpectedChunkType,
    with_field,
)
from .events import (
    ChannelMessage,
    EndOfTrack,
    Event,
    MetaMessage,
    SysexMessage,
    decode_event,
)
from .vlq import Buffer, Vlq

logger = logging.getLogger(__name__)

_EVENT_TYPES = (ChannelMessage, SysexMessage, MetaMessage)


@dataclass(frozen=True)
class MTrkEvent:
    delta_time: Vlq
    event: Event
    running_status: bool = False  # status byte omitted on the wire

    def __post_init__(self) -> None:
        try:
            delta_time = Vlq(self.delta_time)
        except SMFError as exc:
            raise with_field(exc, "MTrkEvent.delta_time")
        object.__setattr__(self, "delta_time", delta_time)
        if not isinstance(self.event, _EVENT_TYPES):
            raise TypeError(f"event must be an Event, got {type(self.event).__name__}")
        if self.running_status and not isinstance(self.event, ChannelMessage):
            raise with_field(
                InvalidRunningStatus(None, "only channel messages can omit their status byte"),
                "MTrkEvent.running_status",
            )

    def to_bytes(self) -> bytes:
        if self.running_status:
            body = self.event.data_bytes()  # type: ignore[union-attr]
        else:
            body = self.event.to_bytes()
        return self.delta_time.encode() + body


def _next_running_status(current: Optional[int], event: Event) -> Optional[int]:
    if isinstance(event, ChannelMessage):
        return event.status
    if isinstance(event, SysexMessage):
        return None
    return current


def _check_running_status(events: Tuple[MTrkEvent, ...]) -> None:
    current: Optional[int] = None
    for index, item in enumerate(events):
        event = item.event
        if item.running_status and isinstance(event, ChannelMessage) and event.status != current:
            previous = "none" if current is None else f"0x{current:02X}"
            raise InvalidRunningStatus(
                index, f"status 0x{event.status:02X} omitted but running status is {previous}"
            )
        current = _next_running_status(current, event)


@dataclass(frozen=True)
class TrackChunk:
    events: Tuple[MTrkEvent, ...] = ()

    def __post_init__(self) -> None:
        events = tuple(self.events)
        for item in events:
            if not isinstance(item, MTrkEvent):
                raise TypeError(f"events must be MTrkEvent, got {type(item).__name__}")
        _check_running_status(events)
        object.__setattr__(self, "events", events)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[MTrkEvent]:
        return iter(self.events)

    @classmethod
    def from_payload(cls, payload: Buffer, *, running_status: bool = True) -> "TrackChunk":
        """Decode a track payload.

        With ``running_status=False`` an event without a status byte is an
        :class:`~smf.errors.UnrecognizedStatus` error.
        """

        view = memoryview(payload)
        total = len(view)
        events = []
        current: Optional[int] = None
        omitted_count = 0
        while len(view):
            offset = total - len(view)
            try:
                delta_time, view = Vlq.decode(view)
                omitted = len(view) > 0 and view[0] < 0x80
                event, view = decode_event(view, current if running_status else None)
            except SMFError as exc:
                raise EventDecodeError(len(events), offset, exc) from exc
            omitted_count += omitted
            events.append(MTrkEvent(delta_time, event, omitted))
            current = _next_running_status(current, event)

        logger.debug(
            "decoded %d events from %d-byte track payload (%d with running status)",
            len(events),
            total,
            omitted_count,
        )
        return cls(tuple(events))

    @classmethod
    def from_bytes(
        cls, data: Buffer, *, running_status: bool = True
    ) -> Tuple["TrackChunk", memoryview]:
        chunk_type, payload, rest = unframe(data)
        if chunk_type is not ChunkType.TRACK:
            raise UnexpectedChunkType(ChunkType.TRACK.value, chunk_type.value)
        return cls.from_payload(payload, running_status=running_status), rest

    def to_payload(self) -> bytes:
        return b"".join(item.to_bytes() for item in self.events)

    def to_bytes(self) -> bytes:
        return frame(ChunkType.TRACK, self.to_payload())

    def absolute_times(self) -> Iterator[Tuple[int, Event]]:
        """Yield ``(tick, event)`` with ticks counted from the start of the track."""

        tick = 0
        for item in self.events:
            tick += item.delta_time
            yield tick, item.event

    def end_of_track_index(self) -> Optional[int]:
        for index, item in enumerate(self.events):
            if isinstance(item.event, EndOfTrack):
                return index
        return None


def encode_track(events: Iterable[MTrkEvent]) -> bytes:
    return TrackChunk(tuple(events)).to_bytes()


def decode_track(payload: Buffer, *, running_status: bool = True) -> TrackChunk:
    return TrackChunk.from_payload(payload, running_status=running_status)
