#!/usr/bin/env python3
"""Write a small two-track demo file.

Track 0 carries a 102 BPM tempo, track 1 a single note (C4 on at tick 0,
E4 velocity-0 "off" at tick 192).

Usage:
  python tools/write_example.py output/example.mid
  python tools/write_example.py output/example.mid --no-running-status
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import List, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf import (  # noqa: E402
    DEFAULT_TIME_BASE,
    Message,
    MetaEvent,
    MidiEvent,
    NoteOn,
    TrackChange,
    Writer,
)

EXAMPLE_BPM = 102


def example_messages(bpm: int = EXAMPLE_BPM) -> List[Message]:
    tempo = 60 * 1_000_000 // bpm
    return [
        MetaEvent.set_tempo(tempo),
        MetaEvent.end_of_track(),
        TrackChange(),
        MidiEvent(0, NoteOn(0, note=0x3C, velocity=0x7F)),
        MidiEvent(192, NoteOn(0, note=0x40, velocity=0)),
        MetaEvent.end_of_track(),
    ]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write the two-track demo MIDI file.")
    parser.add_argument("output", type=Path, help="Destination .mid path.")
    parser.add_argument("--bpm", type=int, default=EXAMPLE_BPM, help="Tempo in BPM.")
    parser.add_argument(
        "--time-base", type=int, default=DEFAULT_TIME_BASE, help="Ticks per quarter note."
    )
    parser.add_argument(
        "--no-running-status",
        action="store_true",
        help="Always emit explicit status bytes.",
    )
    args = parser.parse_args(argv)

    writer = Writer(time_base=args.time_base, running_status=not args.no_running_status)
    for message in example_messages(args.bpm):
        writer.push(message)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    size = writer.write(args.output)
    print(f"wrote {args.output} ({size} bytes, {len(writer.tracks())} tracks)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
