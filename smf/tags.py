from __future__ import annotations

from enum import Enum

TAG_SIZE = 4


class Tag(Enum):
    """Four-byte ASCII chunk markers."""

    HEADER = b"MThd"
    TRACK = b"MTrk"

    def binary(self) -> bytes:
        return self.value

    def __len__(self) -> int:
        return TAG_SIZE
