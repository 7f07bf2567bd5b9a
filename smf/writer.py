"""Assemble pushed messages into a Standard MIDI File.

Messages are pushed in program order.  ``TrackChange`` splits the stream
into track chunks; the caller is responsible for ending every track with
an end-of-track meta event.

With running status enabled, a channel voice status byte is left out when
it repeats the previous one in the same track.  Meta and sysex events
always cancel running status.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, List, Union

from .errors import FormatError, UnsupportedValue
from .header import DEFAULT_TIME_BASE, SUPPORTED_FORMATS, Header
from .messages import Message, MidiEvent, TrackChange
from .running_status import RunningStatus
from .tags import Tag

logger = logging.getLogger(__name__)

Destination = Union[str, Path, BinaryIO]


def encode_track(messages: List[Message], *, running_status: bool = False) -> bytes:
    """Encode one track's events (without the chunk header)."""

    context = RunningStatus(enabled=running_status)
    parts: List[bytes] = []
    for message in messages:
        if isinstance(message, TrackChange):
            raise FormatError("TrackChange cannot be encoded inside a track")
        if isinstance(message, MidiEvent):
            elide = context.should_elide(message.status_byte)
            parts.append(message.binary(elide_status=elide))
        else:
            context.reset()
            parts.append(message.binary())
    return b"".join(parts)


def track_chunk(body: bytes) -> bytes:
    if len(body) > 0xFFFFFFFF:
        raise UnsupportedValue(f"track body of {len(body)} bytes exceeds 32-bit length")
    return Tag.TRACK.binary() + struct.pack(">I", len(body)) + body


class Writer:
    def __init__(
        self,
        *,
        time_base: int = DEFAULT_TIME_BASE,
        running_status: bool = False,
        format: int = 1,
    ) -> None:
        if format not in SUPPORTED_FORMATS:
            raise UnsupportedValue(f"unsupported SMF format {format}")
        self.time_base = time_base
        self.running_status = running_status
        self.format = format
        self.messages: List[Message] = []

    def push(self, message: Message) -> None:
        self.messages.append(message)

    def tracks(self) -> List[List[Message]]:
        """Pushed messages split into tracks at each ``TrackChange``."""

        if not self.messages:
            return []
        tracks: List[List[Message]] = [[]]
        for message in self.messages:
            if isinstance(message, TrackChange):
                tracks.append([])
            else:
                tracks[-1].append(message)
        return tracks

    def to_bytes(self) -> bytes:
        tracks = self.tracks()
        if self.format == 0 and len(tracks) > 1:
            raise UnsupportedValue(
                f"format 0 files hold a single track, got {len(tracks)}"
            )
        header = Header(format=self.format, track_count=len(tracks), time_base=self.time_base)
        parts = [header.to_bytes()]
        for index, track in enumerate(tracks):
            body = encode_track(track, running_status=self.running_status)
            logger.debug("track %d: %d event(s), %d bytes", index, len(track), len(body))
            parts.append(track_chunk(body))
        return b"".join(parts)

    def write(self, destination: Destination) -> int:
        """Write the file to an open binary stream or a path.

        Returns the number of bytes written.  A failed write is not rolled
        back and may leave a truncated file behind.
        """
        data = self.to_bytes()
        if hasattr(destination, "write"):
            written = destination.write(data)
        else:
            with open(destination, "wb") as fh:
                written = fh.write(data)
        if written is not None and written != len(data):
            raise OSError(f"short write: {written} of {len(data)} bytes")
        return len(data)


__all__ = ["Writer", "encode_track", "track_chunk"]
