"""
Delay timer driven by wall-clock time.

The timer is never ticked. It remembers the value it was started with
and when, and works out the current value on every read:

    value = max(0, start_value - floor(elapsed_ms * 60 / 1000))

so it counts down at 60Hz no matter how many instructions per second
the driver runs.
"""

import logging
import math
import time
from typing import Callable

from .constants import TIMER_HZ

logger = logging.getLogger(__name__)


class DelayTimer:
    """Lazily evaluated 60Hz countdown"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.start_value = 0
        self.start_time = clock()

    def start(self, value: int):
        """Restart the countdown at `value`"""
        self.start_value = value & 0xFF
        self.start_time = self._clock()
        logger.debug("Delay timer started at %d", self.start_value)

    def get_value(self) -> int:
        elapsed_ms = max(0.0, self._clock() - self.start_time) * 1000
        ticks = math.floor(elapsed_ms * TIMER_HZ / 1000)
        return max(0, self.start_value - ticks)
