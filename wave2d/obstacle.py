"""Rectangular obstacles that block wave propagation."""

from __future__ import annotations

from wave2d.buffer import ArrBuffer


def clear_alpha_region(buffer: ArrBuffer, row: int, col: int, width: int, height: int) -> None:
    """Zero the propagation coefficient on the part of a global rectangle inside this tile."""
    r0 = max(row, buffer.start_row)
    r1 = min(row + height, buffer.start_row + buffer.m)
    c0 = max(col, buffer.start_col)
    c1 = min(col + width, buffer.start_col + buffer.n)
    if r0 >= r1 or c0 >= c1:
        return
    lr = r0 - buffer.start_row + 1
    lc = c0 - buffer.start_col + 1
    buffer.alpha[lr : lr + (r1 - r0), lc : lc + (c1 - c0)] = 0.0