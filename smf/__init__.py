"""Read and write Standard MIDI Files."""

from .builder import MidiEventBuilder  # noqa: F401
from .errors import (  # noqa: F401
    FormatError,
    SMFError,
    TruncatedInput,
    UnexpectedTag,
    UnsupportedFormat,
    UnsupportedValue,
)
from .handlers import MessageCollector, read_messages  # noqa: F401
from .header import DEFAULT_TIME_BASE, Header  # noqa: F401
from .messages import (  # noqa: F401
    ChannelEvent,
    ChannelPressure,
    ControlChange,
    Message,
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
    TrackChange,
    UnknownChannelEvent,
)
from .reader import Handler, Reader, ReaderState  # noqa: F401
from .tags import Tag  # noqa: F401
from .vlq import VLQ, decode_vlq, encode_vlq, vlq_length  # noqa: F401
from .writer import Writer  # noqa: F401
