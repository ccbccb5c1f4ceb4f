"""Finite-difference update of a tile and the ghost-cell exchange between tiles."""

from __future__ import annotations

import asyncio
import sys
from enum import Enum
from typing import Any, Sequence

import numpy as np

from wave2d.buffer import ArrBuffer
from wave2d.obstacle import clear_alpha_region
from wave2d.stimulus import Stimulus

KAPPA = 0.2899999999999999
_ABSORB = (KAPPA - 1.0) / (KAPPA + 1.0)


class Side(Enum):
    """The side of the sending tile a ghost-cell message was taken from."""

    TOP = 1
    BOTTOM = 2
    LEFT = 3
    RIGHT = 4


def compute_u(buffer: ArrBuffer) -> None:
    """Advance the cells at least two away from the tile border into ``nxt``."""
    m, n = buffer.grid_m, buffer.grid_n
    if m < 5 or n < 5:
        return
    cur, prev, alpha = buffer.cur, buffer.prev, buffer.alpha
    centre = cur[2 : m - 2, 2 : n - 2]
    buffer.nxt[2 : m - 2, 2 : n - 2] = (
        alpha[2 : m - 2, 2 : n - 2]
        * (
            cur[1 : m - 3, 2 : n - 2]
            + cur[3 : m - 1, 2 : n - 2]
            + cur[2 : m - 2, 1 : n - 3]
            + cur[2 : m - 2, 3 : n - 1]
            - 4.0 * centre
        )
        + 2.0 * centre
        - prev[2 : m - 2, 2 : n - 2]
    )


def _row_stencil(buffer: ArrBuffer, r: int) -> np.ndarray:
    n = buffer.grid_n
    cur = buffer.cur
    inner = slice(1, n - 1)
    centre = cur[r, inner]
    return (
        buffer.alpha[r, inner]
        * (cur[r - 1, inner] + cur[r + 1, inner] + cur[r, 0 : n - 2] + cur[r, 2:n] - 4.0 * centre)
        + 2.0 * centre
        - buffer.prev[r, inner]
    )


def _col_stencil(buffer: ArrBuffer, c: int) -> np.ndarray:
    m = buffer.grid_m
    cur = buffer.cur
    inner = slice(1, m - 1)
    centre = cur[inner, c]
    return (
        buffer.alpha[inner, c]
        * (cur[0 : m - 2, c] + cur[2:m, c] + cur[inner, c - 1] + cur[inner, c + 1] - 4.0 * centre)
        + 2.0 * centre
        - buffer.prev[inner, c]
    )


def compute_edge_u(
    buffer: ArrBuffer,
    top_global_edge: bool,
    bot_global_edge: bool,
    left_global_edge: bool,
    right_global_edge: bool,
) -> None:
    """Advance the outermost interior ring, then apply absorbing boundaries on global edges."""
    m, n = buffer.grid_m, buffer.grid_n
    nxt, cur = buffer.nxt, buffer.cur

    for r in (1, m - 2):
        nxt[r, 1 : n - 1] = _row_stencil(buffer, r)
    for c in (1, n - 2):
        nxt[1 : m - 1, c] = _col_stencil(buffer, c)

    if top_global_edge:
        nxt[0, 1 : n - 1] = cur[1, 1 : n - 1] + _ABSORB * (nxt[1, 1 : n - 1] - cur[0, 1 : n - 1])
    if bot_global_edge:
        r = m - 1
        nxt[r, 1 : n - 1] = cur[r - 1, 1 : n - 1] + _ABSORB * (
            nxt[r - 1, 1 : n - 1] - cur[r, 1 : n - 1]
        )
    if left_global_edge:
        nxt[1 : m - 1, 0] = cur[1 : m - 1, 1] + _ABSORB * (nxt[1 : m - 1, 1] - cur[1 : m - 1, 0])
    if right_global_edge:
        c = n - 1
        nxt[1 : m - 1, c] = cur[1 : m - 1, c - 1] + _ABSORB * (
            nxt[1 : m - 1, c - 1] - cur[1 : m - 1, c]
        )


def compute_neighbors(
    t_id: int, px: int, py: int
) -> tuple[int | None, int | None, int | None, int | None]:
    """Tile ids above, below, left and right of ``t_id``; None where there is none."""
    x = t_id % px
    y = t_id // px
    top = t_id - px if y > 0 else None
    bottom = t_id + px if y < py - 1 else None
    left = t_id - 1 if x > 0 else None
    right = t_id + 1 if x < px - 1 else None
    return top, bottom, left, right


def _apply_ghost(buffer: ArrBuffer, side: Side, data: np.ndarray) -> None:
    if side is Side.TOP:
        buffer.update_row(buffer.grid_m - 1, data)
    elif side is Side.BOTTOM:
        buffer.update_row(0, data)
    elif side is Side.LEFT:
        buffer.update_col(buffer.grid_n - 1, data)
    else:
        buffer.update_col(0, data)


async def exchange_ghost_cells(
    buffer: ArrBuffer,
    inbox: asyncio.Queue,
    outboxes: Sequence[asyncio.Queue],
    top_t_id: int | None,
    bot_t_id: int | None,
    left_t_id: int | None,
    right_t_id: int | None,
) -> None:
    """Send edge rows/columns to neighbouring tiles and fill ghost cells from theirs."""
    outgoing = []
    if top_t_id is not None:
        outgoing.append((top_t_id, Side.TOP, buffer.extract_row(1)))
    if bot_t_id is not None:
        outgoing.append((bot_t_id, Side.BOTTOM, buffer.extract_row(buffer.grid_m - 2)))
    if left_t_id is not None:
        outgoing.append((left_t_id, Side.LEFT, buffer.extract_col(1)))
    if right_t_id is not None:
        outgoing.append((right_t_id, Side.RIGHT, buffer.extract_col(buffer.grid_n - 2)))

    for target, side, data in outgoing:
        await outboxes[target].put((side, data))

    for _ in outgoing:
        side, data = await inbox.get()
        _apply_ghost(buffer, side, data)


def _int_field(obj: dict, key: str) -> int:
    value = obj.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def build_stimuli(cb: Any, buffer: ArrBuffer) -> list[Stimulus]:
    """Create the sine sources of the config and apply its obstacles to this tile."""
    config = cb.config
    if not isinstance(config, dict) or "objects" not in config:
        return []
    objects = config["objects"]
    if not isinstance(objects, list):
        raise ValueError("config 'objects' must be a list")

    stimuli: list[Stimulus] = []
    for obj in objects:
        if not isinstance(obj, dict):
            obj = {}
        obj_type = obj.get("type")
        if not isinstance(obj_type, str):
            obj_type = ""
        if obj_type == "sine":
            stimuli.append(
                Stimulus(
                    buffer,
                    _int_field(obj, "start"),
                    _int_field(obj, "duration"),
                    _int_field(obj, "row"),
                    _int_field(obj, "col"),
                    _int_field(obj, "period"),
                )
            )
        elif obj_type == "rectobstacle":
            clear_alpha_region(
                buffer,
                _int_field(obj, "row"),
                _int_field(obj, "col"),
                _int_field(obj, "width"),
                _int_field(obj, "height"),
            )
        else:
            print(f"Unknown object type: {obj_type!r}", file=sys.stderr)
    return stimuli