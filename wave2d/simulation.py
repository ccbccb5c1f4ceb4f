"""Runs the tiled wave simulation and records every frame to a NetCDF file."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from wave2d.buffer import ArrBuffer
from wave2d.controlblock import parse_args
from wave2d.netcdf import NetCDFWriter
from wave2d.solver import (
    build_stimuli,
    compute_edge_u,
    compute_neighbors,
    compute_u,
    exchange_ghost_cells,
)
from wave2d.stimulus import Stimulus

OUTPUT_FILE = "output.nc"
_QUEUE_SIZE = 4


@dataclass
class _Tile:
    buffer: ArrBuffer
    stimuli: list[Stimulus]
    neighbors: tuple[int | None, int | None, int | None, int | None]
    edges: tuple[bool, bool, bool, bool]
    inbox: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(maxsize=_QUEUE_SIZE))


def _make_tile(cb: Any, t_id: int) -> _Tile:
    buffer = ArrBuffer(cb, t_id)
    stimuli = build_stimuli(cb, buffer)
    edges = (
        t_id < cb.px,
        t_id >= cb.px * (cb.py - 1),
        t_id % cb.px == 0,
        (t_id + 1) % cb.px == 0,
    )
    return _Tile(buffer, stimuli, compute_neighbors(t_id, cb.px, cb.py), edges)


async def _step(
    tile: _Tile,
    iteration: int,
    outboxes: Sequence[asyncio.Queue],
    exchange: bool,
    grid: np.ndarray,
) -> None:
    if tile.stimuli:
        tile.stimuli = [s for s in tile.stimuli if s.trigger_if_available(iteration)]
    if exchange:
        await exchange_ghost_cells(tile.buffer, tile.inbox, outboxes, *tile.neighbors)
    compute_u(tile.buffer)
    compute_edge_u(tile.buffer, *tile.edges)
    buf = tile.buffer
    grid[buf.start_row : buf.start_row + buf.m, buf.start_col : buf.start_col + buf.n] = buf.cur[
        1:-1, 1:-1
    ]


async def _run(cb: Any, output_path: Path) -> np.ndarray:
    tiles = [_make_tile(cb, t_id) for t_id in range(cb.px * cb.py)]
    outboxes = [tile.inbox for tile in tiles]
    exchange = len(tiles) != 1
    grid_size = cb.m
    grid = np.zeros((grid_size, grid_size))

    with NetCDFWriter(output_path, grid_size, grid_size) as writer:
        for iteration in range(cb.niters):
            await asyncio.gather(
                *(_step(tile, iteration, outboxes, exchange, grid) for tile in tiles)
            )
            writer.write_frame(grid)
            for tile in tiles:
                tile.buffer.adv_buffers()
    return grid


def run_simulation(cb: Any, output_path: str | Path) -> np.ndarray:
    """Run ``cb.niters`` iterations, writing each frame; return the last frame."""
    if cb.px <= 0 or cb.py <= 0:
        raise ValueError("px and py must be positive")
    if cb.m <= 0 or cb.n <= 0:
        raise ValueError("grid size must be positive")
    return asyncio.run(_run(cb, Path(output_path)))


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point: run the simulation into output.nc."""
    cb = parse_args(argv)
    start = time.perf_counter()
    run_simulation(cb, OUTPUT_FILE)
    print(f"Simulation finished! {time.perf_counter() - start:.3f}s")
    return 0