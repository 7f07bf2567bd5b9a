"""Encoding of individual messages and the channel event builder."""

from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.builder import MidiEventBuilder, param_count  # noqa: E402
from smf.errors import FormatError, UnsupportedValue  # noqa: E402
from smf.messages import (  # noqa: E402
    ChannelPressure,
    ControlChange,
    MetaEvent,
    MetaType,
    MidiEvent,
    NoteOff,
    NoteOn,
    PitchBendChange,
    PolyphonicKeyPressure,
    ProgramChange,
    SysExEvent,
    SysExType,
    UnknownChannelEvent,
    meta_type,
)


# ── MetaEvent ───────────────────────────────────────────────────────


class TestMetaEvent:
    def test_set_tempo_binary(self):
        msg = MetaEvent.set_tempo(588235)
        assert msg.event == MetaType.SET_TEMPO
        assert msg.data == bytes.fromhex("08f9cb")
        assert msg.binary() == bytes.fromhex("00ff510308f9cb")
        assert len(msg) == 7

    def test_end_of_track(self):
        msg = MetaEvent.end_of_track(delta_time=200)
        assert msg.binary() == bytes.fromhex("8148ff2f00")
        assert len(msg) == 5

    def test_long_payload_uses_multibyte_length(self):
        text = b"x" * 200
        msg = MetaEvent(0, MetaType.TEXT_EVENT, text)
        encoded = msg.binary()
        assert encoded[:5] == bytes.fromhex("00ff018148")
        assert encoded[5:] == text
        assert len(msg) == len(encoded)

    def test_unknown_type_is_kept_as_int(self):
        msg = MetaEvent(0, 0x60, b"\x01")
        assert msg.event == 0x60
        assert not isinstance(msg.event, MetaType)
        assert msg.binary() == bytes.fromhex("00ff600101")
        assert "UNKNOWN(0x60)" in str(msg)

    def test_int_code_is_promoted_to_named_type(self):
        assert MetaEvent(0, 0x2F).event is MetaType.END_OF_TRACK
        assert meta_type(0x58) is MetaType.TIME_SIGNATURE

    def test_data_accepts_list(self):
        assert MetaEvent(0, MetaType.TEXT_EVENT, [0x41, 0x42]).data == b"AB"

    def test_tempo_must_fit_three_bytes(self):
        with pytest.raises(UnsupportedValue):
            MetaEvent.set_tempo(0x1000000)


# ── SysExEvent ──────────────────────────────────────────────────────


class TestSysExEvent:
    def test_f0_strips_leading_status_byte(self):
        msg = SysExEvent(0, SysExType.F0, bytes([0xF0, 1, 2, 3]))
        assert msg.binary() == bytes([0x00, 0xF0, 0x03, 1, 2, 3])
        assert len(msg) == 6

    def test_f0_without_leading_status_byte(self):
        msg = SysExEvent(0, SysExType.F0, bytes([0x43, 0x12, 0xF7]))
        assert msg.binary() == bytes([0x00, 0xF0, 0x03, 0x43, 0x12, 0xF7])
        assert len(msg) == 6

    def test_f7_payload_is_unmodified(self):
        msg = SysExEvent(5, SysExType.F7, bytes([0xF0, 0x7E]))
        assert msg.binary() == bytes([0x05, 0xF7, 0x02, 0xF0, 0x7E])
        assert len(msg) == 5

    def test_unknown_status(self):
        msg = SysExEvent(0, 0xF5, b"\x01")
        assert msg.event == 0xF5
        assert msg.binary() == bytes([0x00, 0xF5, 0x01, 0x01])


# ── channel voice events ────────────────────────────────────────────


CHANNEL_EVENTS = [
    (NoteOff(1, note=60, velocity=64), "813c40"),
    (NoteOn(15, note=60, velocity=100), "9f3c64"),
    (PolyphonicKeyPressure(2, note=61, pressure=10), "a23d0a"),
    (ControlChange(3, control=7, value=127), "b3077f"),
    (ProgramChange(4, program=12), "c40c"),
    (ChannelPressure(5, pressure=33), "d521"),
    (PitchBendChange(6, value=0), "e60040"),
    (UnknownChannelEvent(2), "f2"),
]


@pytest.mark.parametrize("event,hex_bytes", CHANNEL_EVENTS, ids=lambda v: type(v).__name__)
def test_channel_event_binary(event, hex_bytes):
    encoded = bytes.fromhex(hex_bytes)
    assert event.binary() == encoded
    assert len(event) == len(encoded)
    assert event.status_byte == encoded[0]


def test_midi_event_elided_status():
    msg = MidiEvent(192, NoteOn(0, note=0x40, velocity=0))
    assert msg.binary() == bytes.fromhex("8140" "90" "4000")
    assert msg.binary(elide_status=True) == bytes.fromhex("8140" "4000")
    assert len(msg) == 5


@pytest.mark.parametrize(
    "factory",
    [
        lambda: NoteOn(16, note=60, velocity=1),
        lambda: NoteOn(0, note=128, velocity=1),
        lambda: ControlChange(0, control=1, value=-1),
        lambda: PitchBendChange(0, value=8192),
        lambda: PitchBendChange(0, value=-8193),
        lambda: MidiEvent(-1, NoteOn(0, note=60, velocity=1)),
    ],
)
def test_out_of_range_values_are_rejected(factory):
    with pytest.raises(UnsupportedValue):
        factory()


@pytest.mark.parametrize(
    "channel,nibble",
    [
        (0, 0xF0),  # sysex start
        (7, 0xF0),  # sysex escape
        (15, 0xF0),  # meta
        (0, 0x90),  # would read as NoteOn
        (3, 0xC0),  # would read as ProgramChange
        (1, 0x00),
    ],
)
def test_unknown_status_cannot_collide(channel, nibble):
    with pytest.raises(UnsupportedValue):
        UnknownChannelEvent(channel, status_nibble=nibble)


def test_str_is_readable():
    assert str(NoteOn(0, note=60, velocity=127)) == "NoteOn ch=0 note=60 velocity=127"
    assert str(MetaEvent.end_of_track()) == "Meta END_OF_TRACK data="


# ── MidiEventBuilder ────────────────────────────────────────────────


class TestMidiEventBuilder:
    @pytest.mark.parametrize(
        "status,expected",
        [(0x80, 2), (0x93, 2), (0xA0, 2), (0xBF, 2), (0xC0, 1), (0xD7, 1), (0xE0, 2), (0xF3, 0)],
    )
    def test_param_count(self, status, expected):
        assert param_count(status) == expected
        assert MidiEventBuilder(status).shortage() == expected

    def test_push_until_complete(self):
        builder = MidiEventBuilder(0x92)
        builder.push(0x3C)
        assert builder.shortage() == 1
        builder.push(0x7F)
        assert builder.shortage() == 0
        builder.push(0x11)  # ignored once complete
        assert builder.build() == NoteOn(2, note=0x3C, velocity=0x7F)

    @pytest.mark.parametrize("event", [e for e, _ in CHANNEL_EVENTS])
    def test_build_matches_encoded_event(self, event):
        encoded = event.binary()
        builder = MidiEventBuilder(encoded[0])
        for byte in encoded[1:]:
            builder.push(byte)
        assert builder.build() == event

    def test_incomplete_build_raises(self):
        builder = MidiEventBuilder(0xB0)
        builder.push(0x07)
        with pytest.raises(FormatError):
            builder.build()


class TestPitchBend:
    def test_wire_order_is_lsb_first(self):
        assert PitchBendChange(0, value=8191).binary() == bytes([0xE0, 0x7F, 0x7F])
        assert PitchBendChange(0, value=-8192).binary() == bytes([0xE0, 0x00, 0x00])
        assert PitchBendChange(0, value=1).binary() == bytes([0xE0, 0x01, 0x40])

    def test_every_wire_value_survives(self):
        for wire in range(1 << 14):
            event = PitchBendChange(0, value=wire - 8192)
            encoded = event.binary()
            builder = MidiEventBuilder(encoded[0])
            builder.push(encoded[1])
            builder.push(encoded[2])
            decoded = builder.build()
            assert decoded.wire_value == wire, f"wire value {wire}"
