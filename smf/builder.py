"""Accumulate the parameter bytes of one channel voice event."""

from __future__ import annotations

from typing import List

from .errors import FormatError
from .messages import (
    PITCH_BEND_CENTER,
    ChannelEvent,
    ChannelPressure,
    ControlChange,
    NoteOff,
    NoteOn,
    PitchBendChange,
    PolyphonicKeyPressure,
    ProgramChange,
    UnknownChannelEvent,
)


def param_count(status: int) -> int:
    """Number of data bytes that follow ``status``."""

    kind = status & 0xF0
    if 0x80 <= kind <= 0xB0 or kind == 0xE0:
        return 2
    if kind in (0xC0, 0xD0):
        return 1
    return 0


class MidiEventBuilder:
    def __init__(self, status: int) -> None:
        self.status = status
        self.data: List[int] = []
        self._shortage = param_count(status)

    def push(self, byte: int) -> None:
        if self._shortage > 0:
            self.data.append(byte)
            self._shortage -= 1

    def shortage(self) -> int:
        return self._shortage

    def build(self) -> ChannelEvent:
        if self._shortage:
            raise FormatError(
                f"status 0x{self.status:02X} still needs {self._shortage} data byte(s)"
            )
        channel = self.status & 0x0F
        kind = self.status & 0xF0
        data = self.data
        if kind == 0x80:
            return NoteOff(channel, note=data[0], velocity=data[1])
        if kind == 0x90:
            return NoteOn(channel, note=data[0], velocity=data[1])
        if kind == 0xA0:
            return PolyphonicKeyPressure(channel, note=data[0], pressure=data[1])
        if kind == 0xB0:
            return ControlChange(channel, control=data[0], value=data[1])
        if kind == 0xC0:
            return ProgramChange(channel, program=data[0])
        if kind == 0xD0:
            return ChannelPressure(channel, pressure=data[0])
        if kind == 0xE0:
            # 14-bit wire value, LSB first, rebased so 0 is centred
            wire = (data[1] << 7) | data[0]
            return PitchBendChange(channel, value=wire - PITCH_BEND_CENTER)
        return UnknownChannelEvent(channel, status_nibble=kind)
