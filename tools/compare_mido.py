#!/usr/bin/env python3
"""Cross-check the smf decoder against mido.

Decodes the same file with both libraries and compares channel voice
events track by track (absolute tick, status, data bytes).

Requirements:
  pip install mido

Usage:
  python tools/compare_mido.py song.mid
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import List, Sequence, Tuple

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import mido  # noqa: E402

from smf import MidiEvent, TrackChange, read_messages  # noqa: E402

Row = Tuple[int, bytes]  # (absolute tick, raw channel message bytes)


def smf_channel_rows(path: Path) -> List[List[Row]]:
    _, messages = read_messages(path)
    tracks: List[List[Row]] = [[]]
    tick = 0
    for message in messages:
        if isinstance(message, TrackChange):
            tracks.append([])
            tick = 0
            continue
        tick += message.delta_time
        if isinstance(message, MidiEvent):
            tracks[-1].append((tick, message.event.binary()))
    return tracks


def mido_channel_rows(path: Path) -> List[List[Row]]:
    mid = mido.MidiFile(str(path))
    tracks: List[List[Row]] = []
    for track in mid.tracks:
        rows: List[Row] = []
        tick = 0
        for msg in track:
            tick += msg.time
            if not msg.is_meta and msg.type != "sysex":
                rows.append((tick, bytes(msg.bytes())))
        tracks.append(rows)
    return tracks


def compare(path: Path) -> List[str]:
    ours = smf_channel_rows(path)
    theirs = mido_channel_rows(path)
    problems: List[str] = []
    if len(ours) != len(theirs):
        problems.append(f"track count differs: smf={len(ours)} mido={len(theirs)}")
    for index, (a, b) in enumerate(zip(ours, theirs)):
        if len(a) != len(b):
            problems.append(f"track {index}: event count smf={len(a)} mido={len(b)}")
        for pos, (row_a, row_b) in enumerate(zip(a, b)):
            if row_a != row_b:
                problems.append(
                    f"track {index} event {pos}: smf=({row_a[0]}, {row_a[1].hex()}) "
                    f"mido=({row_b[0]}, {row_b[1].hex()})"
                )
    return problems


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare smf and mido decoding of a file.")
    parser.add_argument("path", type=Path, help="Path to the .mid file.")
    args = parser.parse_args(argv)

    problems = compare(args.path)
    for line in problems:
        print(line)
    if problems:
        return 1
    print("ok: channel events match")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
