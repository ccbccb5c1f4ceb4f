# wave2d

`wave2d` simulates the two-dimensional wave equation on a square grid with a
finite-difference scheme. The grid is split into `px × py` tiles. Each tile
keeps three time levels and a one-cell ghost border. On every step the tiles run
as asyncio coroutines and swap edge rows and columns with their neighbours. The
outer edges of the domain use an absorbing boundary. Every frame of the field is
written to a classic NetCDF file. That file holds one double variable, `data`,
with dimensions `(frame, y, x)`.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running a simulation

The package installs one command, `wave2d`:

```
wave2d -c scene.config -i 200 -x 2 -y 2
```

It runs the simulation and writes every frame to `output.nc` in the current
directory. When it is done it prints `Simulation finished!` and the elapsed time.

Options:

| Option | Meaning | Default |
|--------|---------|---------|
| `-c FILE` | JSON configuration file, relative to the current directory | required |
| `-n N` | grid size; the grid is `N × N` | 100 |
| `-i N` | number of iterations (frames) | 100 |
| `-s N` | statistics frequency; stored, not used by the simulation | 0 |
| `-p N` | plot frequency; read by `Plotter` only | 0 |
| `-x N` | number of tiles across | 1 |
| `-y N` | number of tiles down | 1 |
| `-k` | accepted and ignored | off |

Options on the command line take precedence over the configuration file. If the
configuration file is missing or is not valid JSON, the defaults are used and
there are no scene objects.

## Configuration file

The configuration is a JSON object. The keys `"-n"`, `"-i"`, `"-x"` and `"-y"`
set the matching options when they hold non-negative integers. An `"objects"`
list describes what is placed in the scene:

```json
{
  "-n": 500,
  "-i": 200,
  "objects": [
    {"type": "sine", "row": 250, "col": 250, "start": 0, "duration": 50, "period": 20},
    {"type": "rectobstacle", "row": 100, "col": 300, "width": 40, "height": 10}
  ]
}
```

* `sine`: a point source of amplitude 10 at global cell `(row, col)`. At each
  iteration from `start` to `start + duration` it sets the current and previous
  field at that cell to `10 * sin(2π * tick / period)`, where `tick` counts up
  from 0 at `start`.
* `rectobstacle`: a rectangle starting at `(row, col)`, `width` columns wide and
  `height` rows tall. Inside it the propagation coefficient is set to zero, so
  the wave does not pass through it.

A missing or non-integer field counts as 0. Objects of any other type are
reported on standard error and otherwise ignored.

## Using it from Python

```python
from wave2d.controlblock import parse_args
from wave2d.simulation import run_simulation
from wave2d.netcdf import read_frames

cb = parse_args(["-c", "scene.config", "-n", "64", "-i", "50"])
last = run_simulation(cb, "output.nc")   # numpy array of the last frame

frames = read_frames("output.nc")        # shape (frames, 64, 64)
```

`run_simulation` raises `ValueError` if the tile counts or the grid size are
not positive.

The building blocks are also available on their own:

* `ControlBlock` and `parse_args` in `wave2d.controlblock` hold and build the
  run settings.
* `ArrBuffer` in `wave2d.buffer` holds one tile. It keeps the `prev`, `cur` and
  `nxt` fields, the `alpha` coefficient field and the ghost cells. It maps
  between global and local coordinates with `check_bounds` and `map_to_local`,
  and rotates time levels with `adv_buffers`. It reads and writes edges with
  `extract_row`, `update_row`, `extract_col` and `update_col`, and dumps its
  fields as text with `format_buffers`.
* `compute_u` and `compute_edge_u` in `wave2d.solver` advance a tile by one step.
  `exchange_ghost_cells` swaps the borders of neighbouring tiles through asyncio
  queues, and `compute_neighbors` finds the neighbours of a tile.
  `build_stimuli` turns the configuration's objects into sources and obstacles
  for a tile.
* `Stimulus` in `wave2d.stimulus` and `clear_alpha_region` in `wave2d.obstacle`
  implement the scene objects.
* `NetCDFWriter` in `wave2d.netcdf` appends frames one at a time to a NetCDF
  file and works as a context manager. `read_frames` reads them back.
* `Plotter` in `wave2d.plotter` returns a copy of tile 0's current field when
  the plot frequency is non-zero.

## What it does not do

`wave2d` draws nothing on screen. `Plotter` only hands back arrays, and the
command does not use it. The `-s` statistics frequency is not acted on. To look
at a run, read `output.nc` with `read_frames` or any NetCDF tool.