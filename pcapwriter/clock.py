"""
Wall-clock sources for record timestamps.

A clock is any callable taking no arguments and returning the current
time as integer nanoseconds since the epoch.
"""

import itertools
import time

system_clock = time.time_ns


class FixedClock(object):
    """Always returns the same instant."""

    __slots__ = ["now_ns"]

    def __init__(self, now_ns):
        self.now_ns = now_ns

    def __call__(self):
        return self.now_ns


class StepClock(object):
    """Starts at ``start_ns`` and advances by ``step_ns`` on every read."""

    __slots__ = ["_counter"]

    def __init__(self, start_ns, step_ns=1):
        self._counter = itertools.count(start_ns, step_ns)

    def __call__(self):
        return next(self._counter)
