"""Variable-length quantities.

Delta times and payload lengths are stored as big-endian base-128 digits.
Every byte but the last carries the continuation bit (0x80).  The format
caps values at four bytes, i.e. 0x0FFFFFFF.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import TruncatedInput, UnsupportedValue

VLQ_MAX = 0x0FFFFFFF
VLQ_MAX_BYTES = 4
CONTINUATION_BIT = 0x80


def _check(value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise UnsupportedValue(f"VLQ magnitude must be an integer, got {value!r}")
    if value < 0 or value > VLQ_MAX:
        raise UnsupportedValue(
            f"VLQ magnitude {value} outside 0..0x{VLQ_MAX:08X}"
        )
    return value


def vlq_length(value: int) -> int:
    """Return the encoded size of ``value`` without building the bytes."""

    _check(value)
    size = 1
    while value >= CONTINUATION_BIT:
        value >>= 7
        size += 1
    return size


def encode_vlq(value: int) -> bytes:
    _check(value)
    digits = [value & 0x7F]
    value >>= 7
    while value:
        digits.append((value & 0x7F) | CONTINUATION_BIT)
        value >>= 7
    return bytes(reversed(digits))


def decode_vlq(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode one VLQ starting at ``offset``.

    Returns ``(value, consumed)``.  Raises ``TruncatedInput`` when the
    buffer ends before a byte with the continuation bit clear, and
    ``UnsupportedValue`` when the quantity runs past four bytes.
    """
    value = 0
    pos = offset
    while True:
        if pos >= len(data):
            raise TruncatedInput(
                f"buffer ended inside variable-length quantity at 0x{offset:04X}"
            )
        if pos - offset == VLQ_MAX_BYTES:
            raise UnsupportedValue(
                f"variable-length quantity at 0x{offset:04X} exceeds {VLQ_MAX_BYTES} bytes"
            )
        byte = data[pos]
        pos += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & CONTINUATION_BIT:
            return value, pos - offset


@dataclass(frozen=True)
class VLQ:
    value: int

    def __post_init__(self) -> None:
        _check(self.value)

    def binary(self) -> bytes:
        return encode_vlq(self.value)

    def __len__(self) -> int:
        return vlq_length(self.value)

    def __int__(self) -> int:
        return self.value
