"""Decode a Standard MIDI File into handler callbacks.

The reader walks the file as a small state machine::

    EXPECT_HEADER -> EXPECT_TRACK -> EXPECT_EVENT ... -> TRACK_COMPLETE
                          ^                                   |
                          +---------- next track -------------+--> DONE

Any malformed input moves the reader to ``ERROR`` and the exception
propagates.  Callbacks already delivered stay delivered.

Per-event layout after the delta time:

  top bit clear  -- running status: reuse the track's last channel status,
                    the byte just read is the first data byte
  0xFF           -- meta: type, VLQ(len), data
  0xF0 / 0xF7    -- sysex: VLQ(len), data
  otherwise      -- channel voice status, followed by 0-2 data bytes

Running status is scoped to one track and survives meta and sysex events,
which is what real-world writers produce.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Union

from .builder import MidiEventBuilder
from .errors import FormatError, SMFError, TruncatedInput, UnexpectedTag
from .header import HEADER_CHUNK_SIZE, Header
from .messages import (
    META_STATUS,
    ChannelEvent,
    MetaType,
    SysExType,
    is_channel_voice_status,
    meta_type,
    sys_ex_type,
)
from .running_status import RunningStatus
from .tags import TAG_SIZE, Tag
from .vlq import decode_vlq

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, memoryview, str, Path, BinaryIO]


class Handler:
    """Receives decoded events in file order.  Override what you need."""

    def header(self, format: int, track_count: int, time_base: int) -> None:
        pass

    def meta_event(self, delta_time: int, event: int, data: bytes) -> None:
        pass

    def midi_event(self, delta_time: int, event: ChannelEvent) -> None:
        pass

    def sys_ex_event(self, delta_time: int, event: int, data: bytes) -> None:
        pass

    def track_change(self) -> None:
        pass


class ReaderState(Enum):
    EXPECT_HEADER = "expect_header"
    EXPECT_TRACK = "expect_track"
    EXPECT_EVENT = "expect_event"
    TRACK_COMPLETE = "track_complete"
    DONE = "done"
    ERROR = "error"


@dataclass
class TrackContext:
    index: int
    end: int
    running_status: RunningStatus = field(default_factory=RunningStatus)
    ended: bool = False


def load_source(source: Source) -> bytes:
    """Return the full contents of ``source``.

    Bytes-like values are used as-is, open binary streams are read to EOF
    and paths are opened and closed around this single read.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if hasattr(source, "read"):
        return bytes(source.read())
    return Path(source).read_bytes()


class _Cursor:
    """Byte cursor that never reads past ``limit`` (the current chunk end)."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0
        self.limit = len(data)

    def remaining(self) -> int:
        return self.limit - self.pos

    def _shortfall(self, n: int) -> SMFError:
        if self.limit < len(self.data):
            return FormatError(
                f"need {n} byte(s) at 0x{self.pos:04X}, past chunk end 0x{self.limit:04X}"
            )
        return TruncatedInput(
            f"need {n} byte(s) at 0x{self.pos:04X}, only {self.remaining()} left"
        )

    def take(self, n: int) -> bytes:
        if self.pos + n > self.limit:
            raise self._shortfall(n)
        chunk = self.data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u32(self) -> int:
        return struct.unpack(">I", self.take(4))[0]

    def vlq(self) -> int:
        try:
            value, consumed = decode_vlq(memoryview(self.data)[: self.limit], self.pos)
        except TruncatedInput:
            raise self._shortfall(1) from None
        self.pos += consumed
        return value


class Reader:
    """Sequential SMF decoder.

    ``source`` may be bytes, an open binary stream or a path.  The path is
    opened only for the duration of :meth:`read`.
    """

    def __init__(self, handler: Handler, source: Source) -> None:
        self.handler = handler
        self.source = source
        self.state = ReaderState.EXPECT_HEADER

    def read(self) -> Header:
        self.state = ReaderState.EXPECT_HEADER
        try:
            return self._decode(load_source(self.source))
        except Exception:
            self.state = ReaderState.ERROR
            raise

    def _decode(self, data: bytes) -> Header:
        cursor = _Cursor(data)
        header = Header.from_bytes(data)
        cursor.pos = HEADER_CHUNK_SIZE
        logger.debug(
            "header: format=%d tracks=%d time_base=%d",
            header.format,
            header.track_count,
            header.time_base,
        )
        self.handler.header(header.format, header.track_count, header.time_base)

        for index in range(header.track_count):
            self.state = ReaderState.EXPECT_TRACK
            if index > 0:
                self.handler.track_change()
            self._read_track(cursor, index)
            self.state = ReaderState.TRACK_COMPLETE

        if cursor.remaining():
            logger.debug(
                "ignoring %d trailing byte(s) after track %d",
                cursor.remaining(),
                header.track_count,
            )
        self.state = ReaderState.DONE
        return header

    def _read_track(self, cursor: _Cursor, index: int) -> None:
        start = cursor.pos
        tag = cursor.take(TAG_SIZE)
        if tag != Tag.TRACK.value:
            raise UnexpectedTag(Tag.TRACK.value, tag, start)
        length = cursor.u32()
        if length > cursor.remaining():
            raise TruncatedInput(
                f"track {index} declares {length} bytes at 0x{start:04X}, "
                f"only {cursor.remaining()} available"
            )
        ctx = TrackContext(index=index, end=cursor.pos + length)
        logger.debug("track %d: %d bytes at 0x%04X", index, length, start)

        self.state = ReaderState.EXPECT_EVENT
        cursor.limit = ctx.end
        while cursor.pos < ctx.end:
            self._read_event(cursor, ctx)
        cursor.limit = len(cursor.data)

        if not ctx.ended:
            logger.debug("track %d has no end-of-track event", index)

    def _read_event(self, cursor: _Cursor, ctx: TrackContext) -> None:
        delta_time = cursor.vlq()
        offset = cursor.pos
        status = cursor.u8()

        if status < 0x80:
            if ctx.running_status.last is None:
                raise FormatError(
                    f"data byte 0x{status:02X} at 0x{offset:04X} with no running status"
                )
            builder = MidiEventBuilder(ctx.running_status.last)
            builder.push(status)
            self._finish_channel_event(cursor, builder, delta_time)
            return

        if status == META_STATUS:
            kind = meta_type(cursor.u8())
            data = cursor.take(cursor.vlq())
            if ctx.ended:
                logger.debug("track %d: event after end-of-track at 0x%04X", ctx.index, offset)
            if kind == MetaType.END_OF_TRACK:
                ctx.ended = True
            self.handler.meta_event(delta_time, kind, data)
            return

        if status in (SysExType.F0, SysExType.F7):
            data = cursor.take(cursor.vlq())
            self.handler.sys_ex_event(delta_time, sys_ex_type(status), data)
            return

        if is_channel_voice_status(status):
            ctx.running_status.last = status
        else:
            ctx.running_status.reset()
        builder = MidiEventBuilder(status)
        self._finish_channel_event(cursor, builder, delta_time)

    def _finish_channel_event(
        self, cursor: _Cursor, builder: MidiEventBuilder, delta_time: int
    ) -> None:
        while builder.shortage():
            offset = cursor.pos
            byte = cursor.u8()
            if byte & 0x80:
                raise FormatError(
                    f"status byte 0x{byte:02X} at 0x{offset:04X} where a data byte "
                    f"was expected for status 0x{builder.status:02X}"
                )
            builder.push(byte)
        self.handler.midi_event(delta_time, builder.build())
