"""A whole Standard MIDI File: one header chunk followed by track chunks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from .errors import TrackCountMismatch, TrailingBytes
from .header import Division, Format, HeaderChunk
from .track import TrackChunk
from .vlq import Buffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MidiFile:
    """Header plus tracks.

    Round-trip guarantee: ``MidiFile.from_bytes(data).to_bytes() == data``
    for every file that decodes in strict mode.
    """

    header: HeaderChunk
    tracks: Tuple[TrackChunk, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tracks", tuple(self.tracks))

    @classmethod
    def new(
        cls, format: Format, division: Division, tracks: Iterable[TrackChunk]
    ) -> "MidiFile":
        tracks = tuple(tracks)
        return cls(HeaderChunk(format, len(tracks), division), tracks)

    @property
    def format(self) -> Format:
        return self.header.format

    @property
    def division(self) -> Division:
        return self.header.division

    @classmethod
    def from_bytes(
        cls, data: Buffer, *, strict: bool = True, running_status: bool = True
    ) -> "MidiFile":
        """Decode a complete file.

        Decoding stops after ``ntrks`` tracks or at the end of the buffer,
        whichever comes first.  In strict mode both must coincide: a short
        buffer is a :class:`TrackCountMismatch`, leftover bytes are
        :class:`TrailingBytes`.
        """

        header, rest = HeaderChunk.from_bytes(data)
        tracks = []
        while len(rest) and len(tracks) < header.ntrks:
            track, rest = TrackChunk.from_bytes(rest, running_status=running_status)
            tracks.append(track)

        if strict:
            if len(tracks) != header.ntrks:
                raise TrackCountMismatch(int(header.ntrks), len(tracks))
            if len(rest):
                raise TrailingBytes(len(rest))
        elif len(tracks) != header.ntrks or len(rest):
            logger.warning(
                "header declares %d tracks, decoded %d; %d bytes left over",
                header.ntrks,
                len(tracks),
                len(rest),
            )

        logger.debug("decoded %s file with %d tracks", header.format.name, len(tracks))
        return cls(header, tuple(tracks))

    def to_bytes(self) -> bytes:
        return self.header.to_bytes() + b"".join(track.to_bytes() for track in self.tracks)
