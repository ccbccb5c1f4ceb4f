"""Snapshots of a tile's field for plotting."""

from __future__ import annotations

from typing import Any

import numpy as np

from wave2d.buffer import ArrBuffer


class Plotter:
    """Provides the current field of tile 0 when plotting is enabled."""

    def __init__(self, cb: Any, buffer: ArrBuffer) -> None:
        self.cb = cb
        self.buffer = buffer

    def update_plot(self, n_iter: int) -> np.ndarray | None:
        """Copy of the current field (ghost cells included), or None when not plotting."""
        if self.cb.plot_freq == 0:
            return None
        if self.buffer.t_id != 0:
            return None
        return self.buffer.cur.copy()