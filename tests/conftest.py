from pathlib import Path
import sys
from typing import List, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.reader import Handler  # noqa: E402


class RecordingHandler(Handler):
    """Record every callback as a tuple, in order."""

    def __init__(self) -> None:
        self.calls: List[Tuple] = []

    def header(self, format, track_count, time_base):
        self.calls.append(("header", format, track_count, time_base))

    def meta_event(self, delta_time, event, data):
        self.calls.append(("meta", delta_time, event, data))

    def midi_event(self, delta_time, event):
        self.calls.append(("midi", delta_time, event))

    def sys_ex_event(self, delta_time, event, data):
        self.calls.append(("sysex", delta_time, event, data))

    def track_change(self):
        self.calls.append(("track_change",))

    def of(self, kind: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()
