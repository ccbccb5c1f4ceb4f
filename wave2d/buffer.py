"""Triple-buffered wave field for one tile of the global grid."""

from __future__ import annotations

from itertools import accumulate
from typing import Any

import numpy as np

ALPHA = 0.29 * 0.29


def _extra_col(index: int, cb: Any) -> bool:
    return index % cb.px < cb.n % cb.px


def _extra_row(index: int, cb: Any) -> bool:
    return index // cb.px < cb.m % cb.py


def _format_plane(plane: np.ndarray) -> str:
    return "".join(
        "".join(f"{value:.2f} " for value in row) + "\n" for row in plane[1:-1, 1:-1]
    )


class ArrBuffer:
    """Previous, current and next wave fields of a tile, with a ghost border.

    ``prev``, ``cur`` and ``nxt`` are views of shape ``(grid_m, grid_n)``;
    ``alpha`` holds the per-cell propagation coefficient.
    """

    def __init__(self, cb: Any, t_id: int) -> None:
        self.cb = cb
        self.t_id = t_id

        if cb.px * cb.py == 1:
            self.m, self.n = cb.m, cb.n
        else:
            self.n = cb.n // cb.px + int(_extra_col(t_id, cb))
            self.m = cb.m // cb.py + int(_extra_row(t_id, cb))
        self.grid_m = self.m + 2
        self.grid_n = self.n + 2

        start_cols = list(
            accumulate(
                (cb.n // cb.px + int(_extra_col(col, cb)) for col in range(cb.px)),
                initial=0,
            )
        )
        start_rows = list(
            accumulate(
                (cb.m // cb.py + int(_extra_row(row, cb)) for row in range(cb.py)),
                initial=0,
            )
        )
        self.start_row = start_rows[t_id // cb.px]
        self.start_col = start_cols[t_id % cb.px]

        self._pool = np.zeros((3, self.grid_m, self.grid_n))
        self.alpha = np.full((self.grid_m, self.grid_n), ALPHA)
        self._prev, self._curr, self._next = 0, 1, 2

    @property
    def prev(self) -> np.ndarray:
        return self._pool[self._prev]

    @property
    def cur(self) -> np.ndarray:
        return self._pool[self._curr]

    @property
    def nxt(self) -> np.ndarray:
        return self._pool[self._next]

    def adv_buffers(self) -> None:
        """Rotate the fields: current becomes previous, next becomes current."""
        self._prev, self._curr, self._next = self._curr, self._next, self._prev

    def check_bounds(self, r: int, c: int) -> bool:
        """Whether global cell (r, c) lies inside this tile."""
        return (
            self.start_row <= r < self.start_row + self.m
            and self.start_col <= c < self.start_col + self.n
        )

    def map_to_local(self, globr: int, globc: int) -> tuple[int, int] | None:
        """Local (ghost-offset) index of a global cell, or None if outside the tile."""
        local_r = globr - self.start_row
        local_c = globc - self.start_col
        if not (0 <= local_r < self.m and 0 <= local_c < self.n):
            return None
        return local_r + 1, local_c + 1

    def extract_row(self, r: int) -> np.ndarray:
        """Copy of row r of the current field, ghost cells included."""
        return self.cur[r].copy()

    def update_row(self, r: int, values) -> None:
        """Overwrite row r of the current field; values must span the full width."""
        row = np.asarray(values, dtype=float)
        if row.shape != (self.grid_n,):
            raise ValueError(f"row needs {self.grid_n} values, got shape {row.shape}")
        self.cur[r] = row

    def extract_col(self, c: int) -> np.ndarray:
        """Copy of column c of the current field, ghost cells included."""
        return self.cur[:, c].copy()

    def update_col(self, c: int, values) -> None:
        """Overwrite column c of the current field from the top, one value per row."""
        col = np.asarray(values, dtype=float)
        if col.ndim != 1 or len(col) > self.grid_m:
            raise ValueError(f"column takes at most {self.grid_m} values")
        self.cur[: len(col), c] = col

    def sum_sq(self, r: int, c: int, rend: int, cend: int, grid) -> float:
        """Sum of squares of grid[r:rend, c:cend]."""
        block = np.asarray(grid, dtype=float)[r:rend, c:cend]
        return float(np.sum(block * block))

    def format_buffers(self) -> str:
        """Text dump of the interior of the previous, current and next fields."""
        return (
            _format_plane(self.prev)
            + "cur -------\n"
            + _format_plane(self.cur)
            + "next -------\n"
            + _format_plane(self.nxt)
        )