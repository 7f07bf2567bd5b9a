"""Error taxonomy for SMF decoding and encoding.

Everything derives from ``ValueError`` so callers that already guard
parsing with ``except ValueError`` keep working.
"""

from __future__ import annotations


class SMFError(ValueError):
    """Base class for every codec failure."""


class FormatError(SMFError):
    """Structurally invalid input: bad chunk length, stray status byte, overrun."""


class UnexpectedTag(FormatError):
    """A chunk did not start with the expected 4-byte marker."""

    def __init__(self, expected: bytes, found: bytes, offset: int) -> None:
        self.expected = expected
        self.found = found
        self.offset = offset
        super().__init__(
            f"expected chunk tag {expected!r} at 0x{offset:04X}, found {found!r}"
        )


class UnsupportedFormat(FormatError):
    """Header declares an SMF format other than 0, 1 or 2."""


class TruncatedInput(SMFError):
    """The buffer ended before a field or declared length was satisfied."""


class UnsupportedValue(SMFError):
    """A magnitude falls outside what the wire format can represent."""
