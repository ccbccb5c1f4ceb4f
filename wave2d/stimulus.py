"""Sinusoidal point sources driving the wave field."""

from __future__ import annotations

import math

from wave2d.buffer import ArrBuffer

AMPLITUDE = 10


class Stimulus:
    """A sine source at a global cell, active from start_time for duration iterations."""

    def __init__(
        self,
        buffer: ArrBuffer,
        start_time: int,
        duration: int,
        row: int,
        col: int,
        period: int,
    ) -> None:
        self.buffer = buffer
        self.start_time = start_time
        self.duration = duration
        self.row = row
        self.col = col
        self.period = period
        self.amplitude = AMPLITUDE
        self.tick = 0.0

    def _value(self) -> float:
        if self.period == 0:
            return math.nan
        return self.amplitude * math.sin(2.0 * math.pi * self.tick / self.period)

    def trigger_if_available(self, iteration: int) -> bool:
        """Drive the source at this iteration; return False once it has expired."""
        if iteration > self.start_time + self.duration:
            return False
        if iteration < self.start_time:
            return True
        if iteration == self.start_time:
            self.tick = 0.0
        local = self.buffer.map_to_local(self.row, self.col)
        if local is not None:
            value = self._value()
            self.buffer.cur[local] = value
            self.buffer.prev[local] = value
        self.tick += 1.0
        return True