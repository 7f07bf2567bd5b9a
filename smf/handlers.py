"""Handlers that keep decoded events around for the caller."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .header import Header
from .messages import ChannelEvent, Message, MetaEvent, MidiEvent, SysExEvent, TrackChange
from .reader import Handler, Reader, Source


class MessageCollector(Handler):
    """Rebuild ``Message`` values from callbacks, in file order.

    Pushing ``messages`` into a ``Writer`` with the same time base
    reproduces the file's logical content.
    """

    def __init__(self) -> None:
        self.header_info: Optional[Header] = None
        self.messages: List[Message] = []

    def header(self, format: int, track_count: int, time_base: int) -> None:
        self.header_info = Header(format=format, track_count=track_count, time_base=time_base)

    def meta_event(self, delta_time: int, event: int, data: bytes) -> None:
        self.messages.append(MetaEvent(delta_time, event, data))

    def midi_event(self, delta_time: int, event: ChannelEvent) -> None:
        self.messages.append(MidiEvent(delta_time, event))

    def sys_ex_event(self, delta_time: int, event: int, data: bytes) -> None:
        self.messages.append(SysExEvent(delta_time, event, data))

    def track_change(self) -> None:
        self.messages.append(TrackChange())


def read_messages(source: Source) -> Tuple[Header, List[Message]]:
    collector = MessageCollector()
    header = Reader(collector, source).read()
    return header, collector.messages
