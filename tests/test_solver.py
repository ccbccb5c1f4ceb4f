import asyncio

import numpy as np
import pytest

from wave2d.buffer import ArrBuffer
from wave2d.controlblock import ControlBlock
from wave2d.solver import (
    build_stimuli,
    compute_edge_u,
    compute_neighbors,
    compute_u,
    exchange_ghost_cells,
)


def make_cb(size=7, px=1, py=1, config=None):
    return ControlBlock(m=size, n=size, px=px, py=py, niters=5, config=config)


def test_compute_neighbors_corner():
    assert compute_neighbors(0, 2, 2) == (None, 2, None, 1)


def test_compute_neighbors_symmetric():
    px, py = 3, 2
    for t in range(px * py):
        top, bottom, left, right = compute_neighbors(t, px, py)
        if top is not None:
            assert compute_neighbors(top, px, py)[1] == t
        if bottom is not None:
            assert compute_neighbors(bottom, px, py)[0] == t
        if left is not None:
            assert compute_neighbors(left, px, py)[3] == t
        if right is not None:
            assert compute_neighbors(right, px, py)[2] == t


def test_single_tile_has_no_neighbors():
    assert compute_neighbors(0, 1, 1) == (None, None, None, None)


def test_compute_u_preserves_constant_field():
    buf = ArrBuffer(make_cb(), 0)
    buf.cur[:] = 3.0
    buf.prev[:] = 3.0
    compute_u(buf)
    assert np.allclose(buf.nxt[2:-2, 2:-2], 3.0)
    assert np.all(buf.nxt[1] == 0.0)
    assert np.all(buf.nxt[:, 1] == 0.0)


def test_edge_update_leaves_ghosts_without_global_edges():
    buf = ArrBuffer(make_cb(), 0)
    buf.nxt[:] = 7.0
    compute_edge_u(buf, False, False, False, False)
    assert buf.nxt[0].tolist() == [7.0] * 9
    assert buf.nxt[-1].tolist() == [7.0] * 9
    assert buf.nxt[:, 0].tolist() == [7.0] * 9
    assert buf.nxt[1, 1:-1].tolist() == [0.0] * 7
    assert buf.nxt[1:-1, 1].tolist() == [0.0] * 7
    assert buf.nxt[4, 4] == 7.0


def test_edge_update_writes_global_ghosts():
    buf = ArrBuffer(make_cb(), 0)
    buf.nxt[:] = 7.0
    compute_edge_u(buf, True, True, True, True)
    assert np.all(buf.nxt[0, 1:-1] == 0.0)
    assert np.all(buf.nxt[-1, 1:-1] == 0.0)
    assert np.all(buf.nxt[1:-1, 0] == 0.0)
    assert np.all(buf.nxt[1:-1, -1] == 0.0)
    assert buf.nxt[0, 0] == 7.0


def test_pulse_stays_symmetric():
    buf = ArrBuffer(make_cb(7), 0)
    buf.cur[4, 4] = 1.0
    buf.prev[4, 4] = 1.0
    for _ in range(6):
        compute_u(buf)
        compute_edge_u(buf, True, True, True, True)
        buf.adv_buffers()
    assert np.allclose(buf.cur, buf.cur.T)
    assert np.allclose(buf.cur, buf.cur[::-1, :])
    assert np.any(np.abs(buf.cur[1:-1, 1:-1]) > 0.0)


def test_exchange_ghost_cells_between_two_tiles():
    cb = make_cb(4, px=2, py=1)
    left_buf = ArrBuffer(cb, 0)
    right_buf = ArrBuffer(cb, 1)
    left_buf.cur[:] = 1.0
    right_buf.cur[:] = 2.0

    async def run():
        queues = [asyncio.Queue(), asyncio.Queue()]
        await asyncio.gather(
            exchange_ghost_cells(left_buf, queues[0], queues, *compute_neighbors(0, 2, 1)),
            exchange_ghost_cells(right_buf, queues[1], queues, *compute_neighbors(1, 2, 1)),
        )
        return [q.qsize() for q in queues]

    remaining = asyncio.run(run())
    assert remaining == [0, 0]
    assert left_buf.cur[:, -1].tolist() == [2.0] * 6
    assert right_buf.cur[:, 0].tolist() == [1.0] * 6
    assert left_buf.cur[:, 0].tolist() == [1.0] * 6
    assert right_buf.cur[:, -1].tolist() == [2.0] * 6


def test_build_stimuli_and_obstacles(capsys):
    config = {
        "objects": [
            {"type": "sine", "start": 0, "duration": 5, "row": 2, "col": 2, "period": 4},
            {"type": "rectobstacle", "row": 1, "col": 1, "width": 2, "height": 2},
            {"type": "mystery"},
        ]
    }
    buf = ArrBuffer(make_cb(config=config), 0)
    stimuli = build_stimuli(buf.cb, buf)
    assert len(stimuli) == 1
    assert stimuli[0].row == 2 and stimuli[0].period == 4
    assert np.all(buf.alpha[2:4, 2:4] == 0.0)
    assert buf.alpha[1, 1] > 0.0
    assert "Unknown object type" in capsys.readouterr().err


def test_build_stimuli_without_config():
    buf = ArrBuffer(make_cb(config=None), 0)
    assert build_stimuli(buf.cb, buf) == []


def test_build_stimuli_rejects_non_list_objects():
    buf = ArrBuffer(make_cb(config={"objects": 3}), 0)
    with pytest.raises(ValueError):
        build_stimuli(buf.cb, buf)