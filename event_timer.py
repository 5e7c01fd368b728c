# event_timer.py

from typing import Callable

import constants


class EventTimer:
    """
    Fires a callback at a constant rate, independent of the frame rate.

    Each call to `step(dt)` fires the callback once for every event that falls
    inside the elapsed interval. The time left over after the last event is
    carried to the next call, so the long-run rate is exact rather than rounded
    per frame. The callback receives the time elapsed since its event occurred,
    which lets a beam place a new photon where it would be had it been emitted
    at that instant.

    Data Contract:
    - Inputs:
        - rate (float): events per second, > 0.
        - callback (callable): called as callback(time_elapsed).
    - Invariants: 0 < time_before_next_event <= period.
    """
    def __init__(self, rate: float, callback: Callable[[float], None]):
        if rate <= 0:
            raise ValueError(f"EventTimer rate must be positive, got {rate}")
        self.period = 1.0 / rate
        self.callback = callback
        self.time_before_next_event = self.period

    def step(self, dt: float) -> int:
        """Advances the timer by dt seconds. Returns the number of events fired."""
        fired = 0
        while dt >= self.time_before_next_event:
            dt -= self.time_before_next_event
            self.time_before_next_event = self.period
            self.callback(dt)
            fired += 1
        self.time_before_next_event -= dt
        return fired

    def reset(self):
        """Drops any partial interval, so the next event is a full period away."""
        self.time_before_next_event = self.period

    def manual_step(self, interval: float = constants.MANUAL_STEP_DT):
        """Single-step mode: fires exactly once with a nominal frame interval."""
        self.reset()
        self.callback(interval)
