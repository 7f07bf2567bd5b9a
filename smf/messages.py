"""In-memory event model and its wire encoding.

A track is a sequence of ``Message`` values.  Each message knows how to
encode itself (``binary()``) and how many bytes that takes (``len()``)
so the writer can size a track chunk before emitting it.

Message variants
----------------
``MetaEvent``    -- ``FF <type> VLQ(len) <data>``
``MidiEvent``    -- ``<status> <params...>`` (channel voice, see below)
``SysExEvent``   -- ``F0|F7 VLQ(len) <data>``
``TrackChange``  -- track boundary marker, never written as an event

Every encoded event is prefixed with its ``VLQ(delta_time)``.

Channel voice variants
----------------------
Status byte is ``type nibble | channel``.  Parameter counts are fixed:

  0x80 NoteOff                2
  0x90 NoteOn                 2
  0xA0 PolyphonicKeyPressure  2
  0xB0 ControlChange          2
  0xC0 ProgramChange          1
  0xD0 ChannelPressure        1
  0xE0 PitchBendChange        2  (14-bit, LSB first, centred on 8192)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Tuple, Union

from .errors import UnsupportedValue
from .vlq import encode_vlq, vlq_length

META_STATUS = 0xFF
PITCH_BEND_CENTER = 8192
# 0xF0 and 0xF7 start sysex events, 0xFF starts a meta event
UNKNOWN_STATUS_COLLISIONS = frozenset({0xF0, 0xF7, 0xFF})


class MetaType(IntEnum):
    SEQUENCE_NUMBER = 0x00
    TEXT_EVENT = 0x01
    COPYRIGHT_NOTICE = 0x02
    SEQUENCE_OR_TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    MIDI_CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


class SysExType(IntEnum):
    F0 = 0xF0
    F7 = 0xF7


def meta_type(code: int) -> int:
    """Return the ``MetaType`` for ``code``, or ``code`` itself if unnamed."""

    try:
        return MetaType(code)
    except ValueError:
        return code


def sys_ex_type(status: int) -> int:
    try:
        return SysExType(status)
    except ValueError:
        return status


def _kind_name(kind: int) -> str:
    if isinstance(kind, IntEnum):
        return kind.name
    return f"UNKNOWN(0x{kind:02X})"


def _check_byte(name: str, value: int, upper: int = 0xFF) -> None:
    if not isinstance(value, int) or value < 0 or value > upper:
        raise UnsupportedValue(f"{name} must be 0..{upper}, got {value!r}")


# ── channel voice events ────────────────────────────────────────────


@dataclass(frozen=True)
class ChannelEvent:
    """Common shape of the channel voice variants."""

    STATUS: ClassVar[int] = 0x00
    PARAM_COUNT: ClassVar[int] = 0
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ()

    channel: int

    def __post_init__(self) -> None:
        _check_byte("channel", self.channel, 0x0F)
        for name in self.DATA_FIELDS:
            _check_byte(f"{type(self).__name__}.{name}", getattr(self, name), 0x7F)

    @property
    def status_byte(self) -> int:
        return self.STATUS | (self.channel & 0x0F)

    def params(self) -> bytes:
        return b""

    def binary(self) -> bytes:
        return bytes((self.status_byte,)) + self.params()

    def __len__(self) -> int:
        return 1 + self.PARAM_COUNT


@dataclass(frozen=True)
class NoteOff(ChannelEvent):
    STATUS: ClassVar[int] = 0x80
    PARAM_COUNT: ClassVar[int] = 2
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("note", "velocity")

    note: int
    velocity: int

    def params(self) -> bytes:
        return bytes((self.note, self.velocity))

    def __str__(self) -> str:
        return f"NoteOff ch={self.channel} note={self.note} velocity={self.velocity}"


@dataclass(frozen=True)
class NoteOn(ChannelEvent):
    STATUS: ClassVar[int] = 0x90
    PARAM_COUNT: ClassVar[int] = 2
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("note", "velocity")

    note: int
    velocity: int

    def params(self) -> bytes:
        return bytes((self.note, self.velocity))

    def __str__(self) -> str:
        return f"NoteOn ch={self.channel} note={self.note} velocity={self.velocity}"


@dataclass(frozen=True)
class PolyphonicKeyPressure(ChannelEvent):
    STATUS: ClassVar[int] = 0xA0
    PARAM_COUNT: ClassVar[int] = 2
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("note", "pressure")

    note: int
    pressure: int

    def params(self) -> bytes:
        return bytes((self.note, self.pressure))

    def __str__(self) -> str:
        return (
            f"PolyphonicKeyPressure ch={self.channel} note={self.note} "
            f"pressure={self.pressure}"
        )


@dataclass(frozen=True)
class ControlChange(ChannelEvent):
    STATUS: ClassVar[int] = 0xB0
    PARAM_COUNT: ClassVar[int] = 2
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("control", "value")

    control: int
    value: int

    def params(self) -> bytes:
        return bytes((self.control, self.value))

    def __str__(self) -> str:
        return f"ControlChange ch={self.channel} control={self.control} value={self.value}"


@dataclass(frozen=True)
class ProgramChange(ChannelEvent):
    STATUS: ClassVar[int] = 0xC0
    PARAM_COUNT: ClassVar[int] = 1
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("program",)

    program: int

    def params(self) -> bytes:
        return bytes((self.program,))

    def __str__(self) -> str:
        return f"ProgramChange ch={self.channel} program={self.program}"


@dataclass(frozen=True)
class ChannelPressure(ChannelEvent):
    STATUS: ClassVar[int] = 0xD0
    PARAM_COUNT: ClassVar[int] = 1
    DATA_FIELDS: ClassVar[Tuple[str, ...]] = ("pressure",)

    pressure: int

    def params(self) -> bytes:
        return bytes((self.pressure,))

    def __str__(self) -> str:
        return f"ChannelPressure ch={self.channel} pressure={self.pressure}"


@dataclass(frozen=True)
class PitchBendChange(ChannelEvent):
    """Pitch wheel position, -8192..8191 with 0 meaning centred."""

    STATUS: ClassVar[int] = 0xE0
    PARAM_COUNT: ClassVar[int] = 2

    value: int

    def __post_init__(self) -> None:
        if not -PITCH_BEND_CENTER <= self.value < PITCH_BEND_CENTER:
            raise UnsupportedValue(
                f"pitch bend must be -8192..8191, got {self.value!r}"
            )
        super().__post_init__()

    @property
    def wire_value(self) -> int:
        return self.value + PITCH_BEND_CENTER

    def params(self) -> bytes:
        wire = self.wire_value
        return bytes((wire & 0x7F, wire >> 7))

    def __str__(self) -> str:
        return f"PitchBendChange ch={self.channel} value={self.value}"


@dataclass(frozen=True)
class UnknownChannelEvent(ChannelEvent):
    """System common status byte (0xF1-0xFE except 0xF7) carrying no data."""

    status_nibble: int = 0xF0

    def __post_init__(self) -> None:
        _check_byte("status nibble", self.status_nibble)
        super().__post_init__()
        if self.status_nibble & 0xF0 != 0xF0 or self.status_byte in UNKNOWN_STATUS_COLLISIONS:
            raise UnsupportedValue(
                f"status 0x{self.status_byte:02X} collides with another event encoding"
            )

    @property
    def status_byte(self) -> int:
        return (self.status_nibble & 0xF0) | (self.channel & 0x0F)

    def __str__(self) -> str:
        return f"Unknown status=0x{self.status_byte:02X}"


def is_channel_voice_status(status: int) -> bool:
    return 0x80 <= status < 0xF0


# ── messages ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MetaEvent:
    delta_time: int
    event: int
    data: bytes = b""

    def __post_init__(self) -> None:
        vlq_length(self.delta_time)
        _check_byte("meta event type", int(self.event))
        object.__setattr__(self, "event", meta_type(int(self.event)))
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def set_tempo(cls, microseconds_per_quarter: int, delta_time: int = 0) -> "MetaEvent":
        if not 0 <= microseconds_per_quarter <= 0xFFFFFF:
            raise UnsupportedValue(
                f"tempo {microseconds_per_quarter} does not fit in 3 bytes"
            )
        return cls(delta_time, MetaType.SET_TEMPO, microseconds_per_quarter.to_bytes(3, "big"))

    @classmethod
    def end_of_track(cls, delta_time: int = 0) -> "MetaEvent":
        return cls(delta_time, MetaType.END_OF_TRACK)

    def binary(self) -> bytes:
        return b"".join(
            (
                encode_vlq(self.delta_time),
                bytes((META_STATUS, int(self.event))),
                encode_vlq(len(self.data)),
                self.data,
            )
        )

    def __len__(self) -> int:
        return (
            vlq_length(self.delta_time)
            + 2
            + vlq_length(len(self.data))
            + len(self.data)
        )

    def __str__(self) -> str:
        return f"Meta {_kind_name(self.event)} data={self.data.hex()}"


@dataclass(frozen=True)
class MidiEvent:
    delta_time: int
    event: ChannelEvent

    def __post_init__(self) -> None:
        vlq_length(self.delta_time)

    @property
    def status_byte(self) -> int:
        return self.event.status_byte

    def binary(self, *, elide_status: bool = False) -> bytes:
        body = self.event.binary()
        if elide_status:
            body = body[1:]
        return encode_vlq(self.delta_time) + body

    def __len__(self) -> int:
        return vlq_length(self.delta_time) + len(self.event)

    def __str__(self) -> str:
        return f"MIDI {self.event}"


@dataclass(frozen=True)
class SysExEvent:
    """System exclusive event.

    For ``F0`` events a leading ``0xF0`` in ``data`` is treated as the
    status byte and left out of the encoded payload.  The reader never
    adds it back.
    """

    delta_time: int
    event: int
    data: bytes = b""

    def __post_init__(self) -> None:
        vlq_length(self.delta_time)
        _check_byte("sysex status", int(self.event))
        object.__setattr__(self, "event", sys_ex_type(int(self.event)))
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def payload(self) -> bytes:
        if self.event == SysExType.F0 and self.data[:1] == b"\xF0":
            return self.data[1:]
        return self.data

    def binary(self) -> bytes:
        payload = self.payload
        return b"".join(
            (
                encode_vlq(self.delta_time),
                bytes((int(self.event),)),
                encode_vlq(len(payload)),
                payload,
            )
        )

    def __len__(self) -> int:
        payload_len = len(self.payload)
        return vlq_length(self.delta_time) + 1 + vlq_length(payload_len) + payload_len

    def __str__(self) -> str:
        return f"SysEx {_kind_name(self.event)} data={self.data.hex()}"


@dataclass(frozen=True)
class TrackChange:
    def __str__(self) -> str:
        return "TrackChange"


Message = Union[MetaEvent, MidiEvent, SysExEvent, TrackChange]
