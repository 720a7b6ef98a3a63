#!/usr/bin/env python3
"""Human-readable Standard MIDI File inspector.

Parses a single `.mid` file and prints the header fields, the chunk layout
and, per track, every event with its absolute tick.  Events are printed from
the decoded model, so anything shown here is exactly what the codec sees.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf import (  # noqa: E402
    ChannelMode,
    ChannelVoice,
    MidiFile,
    SMFError,
    SubdivisionsOfASecond,
    SysexMessage,
    TicksPerQuarterNote,
    iter_chunks,
)
from smf.events import Event, SetTempo, TextMessage  # noqa: E402
from smf.header import Division  # noqa: E402


def read_file(path: Path) -> bytes:
    if not path.is_file():
        raise FileNotFoundError(path)
    return path.read_bytes()


def format_division(division: Division) -> str:
    if isinstance(division, TicksPerQuarterNote):
        return f"{division.ticks} ticks per quarter note"
    assert isinstance(division, SubdivisionsOfASecond)
    fps = division.timecode_format.frames_per_second
    return f"SMPTE {fps:g} fps, {division.ticks_per_frame} ticks per frame"


def format_event(event: Event) -> str:
    if isinstance(event, ChannelVoice):
        fields = ", ".join(
            f"{name}={value}" for name, value in vars(event.data).items()
        )
        return f"ch{event.channel + 1:<2} {type(event.data).__name__}({fields})"
    if isinstance(event, ChannelMode):
        return f"ch{event.channel + 1:<2} {event.mode.name}(value={event.value})"
    if isinstance(event, SysexMessage):
        tail = "" if event.is_complete else " (continues)"
        return f"Sysex[{event.status.name}] {len(event.data)} B: {event.data.hex(' ')}{tail}"
    if isinstance(event, SetTempo):
        return f"SetTempo {event.tempo} us/qn ({event.tempo.bpm:.2f} BPM)"
    if isinstance(event, TextMessage):
        return f"{type(event).__name__} {event.text!r}"
    return repr(event)


def generate_report(path: Path, data: bytes, *, max_events: int | None = None) -> str:
    lines: List[str] = []
    midi = MidiFile.from_bytes(data, strict=False)
    header = midi.header

    lines.append("Standard MIDI File Inspect")
    lines.append("=" * 26)
    lines.append(f"File: {path.name}   Size: {len(data):,} B")
    lines.append("")

    lines.append("[Header]")
    lines.append(f"  Format:    {header.format.value} ({header.format.name})")
    lines.append(f"  Tracks:    {header.ntrks}")
    lines.append(f"  Division:  {format_division(header.division)}")
    lines.append("")

    lines.append("[Chunks]")
    offset = 0
    for chunk in iter_chunks(data):
        lines.append(
            f"  @0x{offset:06X}  {chunk.type.value.decode('ascii')}  {chunk.length:>8,} B"
        )
        offset += 8 + chunk.length
    lines.append("")

    for index, track in enumerate(midi.tracks):
        running = sum(1 for item in track if item.running_status)
        lines.append(
            f"[Track {index + 1}]  {len(track)} events, {running} with running status"
        )
        for count, (tick, event) in enumerate(track.absolute_times()):
            if max_events is not None and count >= max_events:
                lines.append(f"  ... {len(track) - count} more")
                break
            lines.append(f"  {tick:>8}  {format_event(event)}")
        if track.end_of_track_index() is None:
            lines.append("  (no EndOfTrack event)")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a single Standard MIDI File."
    )
    parser.add_argument("path", type=Path, help="Path to the .mid file to inspect.")
    parser.add_argument(
        "--max-events",
        type=int,
        default=None,
        help="Show at most this many events per track.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    data = read_file(args.path)
    try:
        report = generate_report(args.path, data, max_events=args.max_events)
    except SMFError as exc:
        print(f"ERR  {args.path}: {exc}", file=sys.stderr)
        return 1
    print(report, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
