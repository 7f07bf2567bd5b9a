from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .messages import is_channel_voice_status


@dataclass
class RunningStatus:
    """Last explicit channel voice status byte seen in the current track.

    One instance lives for exactly one track; both the reader and the
    writer create a fresh one at every track boundary.
    """

    enabled: bool = True
    last: Optional[int] = None

    def should_elide(self, status: int) -> bool:
        """Record ``status`` as emitted and report whether it may be omitted."""

        repeat = self.enabled and status == self.last
        self.last = status if is_channel_voice_status(status) else None
        return repeat and self.last is not None

    def reset(self) -> None:
        self.last = None
