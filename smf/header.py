from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import FormatError, TruncatedInput, UnexpectedTag, UnsupportedFormat, UnsupportedValue
from .tags import TAG_SIZE, Tag

HEADER_LENGTH = 6  # declared body length of the MThd chunk
HEADER_CHUNK_SIZE = TAG_SIZE + 4 + HEADER_LENGTH
SUPPORTED_FORMATS = (0, 1, 2)
DEFAULT_TIME_BASE = 480


@dataclass(frozen=True)
class Header:
    """Contents of the ``MThd`` chunk.

    ``time_base`` is kept as the raw 16-bit division word, so SMPTE
    divisions (top bit set) pass through untouched.
    """

    format: int
    track_count: int
    time_base: int

    def __post_init__(self) -> None:
        for name in ("format", "track_count", "time_base"):
            value = getattr(self, name)
            if not 0 <= value <= 0xFFFF:
                raise UnsupportedValue(f"header {name} must fit in 16 bits, got {value}")

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "Header":
        end = offset + HEADER_CHUNK_SIZE
        if len(data) < offset + TAG_SIZE:
            raise TruncatedInput(
                f"file too short for header tag ({len(data)} bytes)"
            )
        tag = bytes(data[offset : offset + TAG_SIZE])
        if tag != Tag.HEADER.value:
            raise UnexpectedTag(Tag.HEADER.value, tag, offset)
        if len(data) < offset + TAG_SIZE + 4:
            raise TruncatedInput(f"file too short for header length ({len(data)} bytes)")
        (length,) = struct.unpack_from(">I", data, offset + TAG_SIZE)
        if length != HEADER_LENGTH:
            raise FormatError(
                f"header chunk length must be {HEADER_LENGTH}, got {length}"
            )
        if len(data) < end:
            raise TruncatedInput(
                f"file too short for header ({len(data)} bytes, need {end})"
            )
        fmt, track_count, time_base = struct.unpack_from(">HHH", data, offset + TAG_SIZE + 4)
        if fmt not in SUPPORTED_FORMATS:
            raise UnsupportedFormat(f"unsupported SMF format {fmt}")
        return cls(format=fmt, track_count=track_count, time_base=time_base)

    def to_bytes(self) -> bytes:
        return Tag.HEADER.binary() + struct.pack(
            ">IHHH", HEADER_LENGTH, self.format, self.track_count, self.time_base
        )
