#!/usr/bin/env python3
"""Round-trip Standard MIDI Files through the codec and report mismatches.

Each file is decoded and re-encoded; the first differing byte is reported
together with the chunk it falls in (``MThd``, ``MTrk #n``).
"""

from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
import sys
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf import ENVELOPE_SIZE, ChunkType, MidiFile, SMFError, iter_chunks  # noqa: E402

MIDI_SUFFIXES = (".mid", ".midi", ".smf")


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    """Expand globs and directories into MIDI files, first occurrence wins."""

    found: Dict[Path, Path] = {}
    for pattern in patterns:
        candidates = [Path(p) for p in sorted(glob.glob(pattern, recursive=True))]
        for candidate in candidates or [Path(pattern)]:
            if candidate.is_dir():
                files = sorted(
                    p for p in candidate.rglob("*") if p.suffix.lower() in MIDI_SUFFIXES
                )
            elif candidate.is_file():
                files = [candidate]
            else:
                continue
            for path in files:
                found.setdefault(path.resolve(), path)
    return list(found.values())


def chunk_spans(data: bytes) -> List[Tuple[str, int, int]]:
    """``(label, start, end)`` for each chunk in ``data``."""

    spans = []
    start = 0
    track_number = 0
    for chunk in iter_chunks(data):
        end = start + ENVELOPE_SIZE + chunk.length
        if chunk.type is ChunkType.TRACK:
            track_number += 1
            label = f"MTrk #{track_number}"
        else:
            label = "MThd"
        spans.append((label, start, end))
        start = end
    return spans


class Mismatch(NamedTuple):
    offset: int
    chunk: str
    original: Optional[int]  # None past the end of the input
    rebuilt: Optional[int]


def first_mismatch(original: bytes, rebuilt: bytes) -> Optional[Mismatch]:
    offset = next(
        (idx for idx, (a, b) in enumerate(zip(original, rebuilt)) if a != b), None
    )
    if offset is None:
        if len(original) == len(rebuilt):
            return None
        offset = min(len(original), len(rebuilt))

    # rebuilt bytes always frame cleanly, the input may carry trailing junk
    chunk = "end of file"
    for label, start, end in chunk_spans(rebuilt):
        if start <= offset < end:
            chunk = label
            break
    return Mismatch(
        offset=offset,
        chunk=chunk,
        original=original[offset] if offset < len(original) else None,
        rebuilt=rebuilt[offset] if offset < len(rebuilt) else None,
    )


def _byte(value: Optional[int]) -> str:
    return "EOF" if value is None else f"0x{value:02X}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode + re-encode .mid files and report mismatches."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Files, directories or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Tolerate track-count mismatches and trailing bytes.",
    )
    parser.add_argument(
        "--no-running-status",
        action="store_true",
        help="Reject events that omit their status byte.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    targets = collect_paths(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    failures = 0
    for path in targets:
        data = path.read_bytes()
        try:
            midi = MidiFile.from_bytes(
                data,
                strict=not args.lenient,
                running_status=not args.no_running_status,
            )
        except SMFError as exc:
            failures += 1
            print(f"ERR  {path}: {exc}")
            continue

        mismatch = first_mismatch(data, midi.to_bytes())
        if mismatch is None:
            print(f"OK   {path}  ({len(midi.tracks)} tracks)")
            continue

        failures += 1
        print(
            f"FAIL {path}: {mismatch.chunk} differs at 0x{mismatch.offset:04X} "
            f"(orig={_byte(mismatch.original)} new={_byte(mismatch.rebuilt)})"
        )

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
