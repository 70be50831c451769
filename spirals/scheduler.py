from __future__ import annotations

"""
Millisecond timer wheel driven by elapsed time.

The engine feeds it the dt returned by pygame's clock every loop iteration;
tests feed it whatever they like. Nothing here sleeps or spawns threads.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class _Timer:
    callback: Callable[[], None]
    interval: float
    due: float
    repeat: bool


class IntervalScheduler:
    def __init__(self) -> None:
        self.now: float = 0.0
        self._timers: Dict[int, _Timer] = {}
        self._next_handle = 1

    @property
    def pending(self) -> int:
        return len(self._timers)

    def _add(self, callback: Callable[[], None], interval_ms: float, repeat: bool) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._timers[handle] = _Timer(callback, interval_ms, self.now + interval_ms, repeat)
        return handle

    def schedule(self, callback: Callable[[], None], interval_ms: float) -> int:
        """Call ``callback`` every ``interval_ms``; returns a handle for cancel()."""
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        return self._add(callback, interval_ms, repeat=True)

    def schedule_once(self, callback: Callable[[], None], delay_ms: float) -> int:
        if delay_ms < 0:
            raise ValueError(f"delay must not be negative, got {delay_ms}")
        return self._add(callback, delay_ms, repeat=False)

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        self._timers.pop(handle, None)

    def tick(self, elapsed_ms: float) -> int:
        """
        Advance virtual time and fire everything that has come due.

        A repeating timer fires at most once per tick. Its next due time stays
        on the interval grid; intervals already missed are skipped, so a
        stalled loop does not produce a burst of catch-up frames. Timers added
        by a callback wait for the next tick.
        Returns the number of callbacks fired.
        """
        self.now += elapsed_ms
        fired = 0
        for handle in sorted(self._timers, key=lambda h: (self._timers[h].due, h)):
            timer = self._timers.get(handle)
            # cancelled by an earlier callback in this tick
            if timer is None or timer.due > self.now:
                continue
            if timer.repeat:
                timer.due += timer.interval
                if timer.due <= self.now:
                    missed = math.floor((self.now - timer.due) / timer.interval) + 1
                    timer.due += missed * timer.interval
            else:
                del self._timers[handle]
            timer.callback()
            fired += 1
        return fired
