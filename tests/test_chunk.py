"""Chunk envelope framing."""

import pytest

from smf.chunk import ENVELOPE_SIZE, Chunk, ChunkType, frame, iter_chunks, unframe
from smf.errors import ChunkTooLarge, InvalidLength, NotEnoughBytes, UnknownChunkType
from smf.header import HeaderChunk
from smf.track import TrackChunk


def test_frame_layout() -> None:
    out = frame(ChunkType.TRACK, b"\x00\xFF\x2F\x00")
    assert out == b"MTrk\x00\x00\x00\x04\x00\xFF\x2F\x00"


def test_unframe_returns_payload_and_remainder() -> None:
    data = frame(ChunkType.HEADER, b"\x00\x01\x00\x02\x01\xE0") + b"MTrk"
    chunk_type, payload, rest = unframe(data)
    assert chunk_type is ChunkType.HEADER
    assert bytes(payload) == b"\x00\x01\x00\x02\x01\xE0"
    assert bytes(rest) == b"MTrk"


@pytest.mark.parametrize("size", [0, 1, 7])
def test_short_envelope(size: int) -> None:
    with pytest.raises(NotEnoughBytes) as excinfo:
        unframe(b"MTrk\x00\x00\x00\x00"[:size])
    assert excinfo.value.needed == ENVELOPE_SIZE


def test_unknown_tag() -> None:
    with pytest.raises(UnknownChunkType) as excinfo:
        unframe(b"RIFF\x00\x00\x00\x00")
    assert excinfo.value.tag == b"RIFF"


def test_declared_length_longer_than_buffer() -> None:
    with pytest.raises(NotEnoughBytes):
        unframe(b"MTrk\x00\x00\x00\x05\x00\xFF\x2F\x00")


def test_chunk_too_large(monkeypatch) -> None:
    monkeypatch.setattr("smf.chunk.MAX_PAYLOAD_SIZE", 3)
    with pytest.raises(ChunkTooLarge):
        frame(ChunkType.TRACK, b"\x00\xFF\x2F\x00")


def test_chunk_round_trip_and_iteration() -> None:
    first = Chunk(ChunkType.HEADER, b"\x00\x00\x00\x01\x00\x60")
    second = Chunk(ChunkType.TRACK, bytearray(b"\x00\xFF\x2F\x00"))
    data = first.to_bytes() + second.to_bytes()

    assert list(iter_chunks(data)) == [first, second]
    assert second.payload == b"\x00\xFF\x2F\x00"
    assert second.length == 4


# ── corrupted length field ───────────────────────────────────────────


TRACK = b"MTrk\x00\x00\x00\x08\x00\x90\x3C\x64\x00\xFF\x2F\x00"


@pytest.mark.parametrize("declared", [0x09, 0x10, 0xFFFFFFFF])
def test_length_longer_than_data_fails(declared: int) -> None:
    corrupted = TRACK[:4] + declared.to_bytes(4, "big") + TRACK[8:]
    with pytest.raises(NotEnoughBytes):
        unframe(corrupted)


@pytest.mark.parametrize("declared", range(0, 8))
def test_length_shorter_than_data_is_caught_by_caller(declared: int) -> None:
    corrupted = TRACK[:4] + declared.to_bytes(4, "big") + TRACK[8:]
    chunk_type, payload, rest = unframe(corrupted)
    assert len(payload) == declared
    assert len(rest) == 8 - declared
    # Either the truncated payload fails to decode, or leftover bytes remain
    # for the next layer to reject.
    try:
        TrackChunk.from_payload(payload)
    except ValueError:
        return
    assert len(rest) > 0


def test_header_payload_length_pinned() -> None:
    data = b"MThd\x00\x00\x00\x07\x00\x01\x00\x01\x01\xE0\x00"
    with pytest.raises(InvalidLength):
        HeaderChunk.from_bytes(data)
