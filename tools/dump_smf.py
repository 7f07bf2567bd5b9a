#!/usr/bin/env python3
"""Print every event in a Standard MIDI File.

Usage:
  python tools/dump_smf.py song.mid
  python tools/dump_smf.py song.mid -v     # include decoder debug logging
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf import ChannelEvent, Handler, Reader, SMFError  # noqa: E402
from smf.messages import MetaType, SysExType  # noqa: E402


def _kind(kind: int, names: type) -> str:
    return kind.name if isinstance(kind, names) else f"UNKNOWN(0x{kind:02X})"


class PrintHandler(Handler):
    def __init__(self) -> None:
        self.track = 0
        self.tick = 0

    def header(self, format: int, track_count: int, time_base: int) -> None:
        print(f"SMF format: {format}, tracks: {track_count}, time base: {time_base}")
        print(f"-- track {self.track}")

    def meta_event(self, delta_time: int, event: int, data: bytes) -> None:
        self.tick += delta_time
        print(
            f"{self.tick:>8} (+{delta_time:>4})  Meta {_kind(event, MetaType)}  "
            f"data={data.hex(' ')}"
        )

    def midi_event(self, delta_time: int, event: ChannelEvent) -> None:
        self.tick += delta_time
        print(f"{self.tick:>8} (+{delta_time:>4})  {event}")

    def sys_ex_event(self, delta_time: int, event: int, data: bytes) -> None:
        self.tick += delta_time
        print(
            f"{self.tick:>8} (+{delta_time:>4})  SysEx {_kind(event, SysExType)}  "
            f"data={data.hex(' ')}"
        )

    def track_change(self) -> None:
        self.track += 1
        self.tick = 0
        print(f"-- track {self.track}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the events of a Standard MIDI File.")
    parser.add_argument("path", type=Path, help="Path to the .mid file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        Reader(PrintHandler(), args.path).read()
    except SMFError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
