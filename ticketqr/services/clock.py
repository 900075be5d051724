# ticketqr/services/clock.py
import time
from typing import Callable, Optional

from ticketqr.core.errors import QRConfigError


class RotationClock:
    """Maps wall-clock time to integer rotation epochs.

    ``now`` returns seconds since the Unix epoch (``time.time`` by default);
    tests inject a fake one.
    """

    def __init__(self, interval_millis: int, now: Optional[Callable[[], float]] = None):
        if interval_millis <= 0:
            raise QRConfigError("rotation interval must be positive")
        self.interval_millis = int(interval_millis)
        self._now = now or time.time

    def now_millis(self) -> int:
        return int(self._now() * 1000)

    def epoch_at(self, timestamp_millis: int) -> int:
        return int(timestamp_millis) // self.interval_millis

    def current_epoch(self) -> int:
        return self.epoch_at(self.now_millis())

    def seconds_until_next_epoch(self) -> float:
        now = self.now_millis()
        return (self.interval_millis - now % self.interval_millis) / 1000
