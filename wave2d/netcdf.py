"""Minimal writer and reader for classic NetCDF files holding a stack of 2-D frames."""

from __future__ import annotations

import struct
from math import prod
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

import numpy as np

MAGIC = b"CDF"
NC_DIMENSION = 0x0A
NC_VARIABLE = 0x0B
NC_ATTRIBUTE = 0x0C
NC_DOUBLE = 6
VARIABLE_NAME = "data"
STREAMING = 0xFFFFFFFF

_TYPE_SIZES = {1: 1, 2: 1, 3: 2, 4: 4, 5: 4, 6: 8}
_TYPE_DTYPES = {1: ">i1", 2: "S1", 3: ">i2", 4: ">i4", 5: ">f4", 6: ">f8"}
_INT32_MAX = 2**31 - 1


def _pad4(length: int) -> int:
    return (-length) % 4


def _encode_name(name: str) -> bytes:
    raw = name.encode("utf-8")
    return struct.pack(">i", len(raw)) + raw + b"\0" * _pad4(len(raw))


class NetCDFWriter:
    """Writes frames of shape (ny, nx) as records of a double variable ``data``."""

    def __init__(self, path: str | Path, ny: int, nx: int) -> None:
        if ny <= 0 or nx <= 0:
            raise ValueError("frame dimensions must be positive")
        self.path = Path(path)
        self.ny = ny
        self.nx = nx
        self.frames = 0
        self._vsize = ny * nx * 8
        if self._vsize > _INT32_MAX:
            raise ValueError("frame too large for the classic format")
        self._file: BinaryIO | None = open(self.path, "wb")
        self._file.write(self._header())
        self._file.flush()

    def _header(self) -> bytes:
        parts = [
            MAGIC + b"\x01",
            struct.pack(">i", self.frames),
            struct.pack(">ii", NC_DIMENSION, 3),
            _encode_name("y"),
            struct.pack(">i", self.ny),
            _encode_name("x"),
            struct.pack(">i", self.nx),
            _encode_name("frame"),
            struct.pack(">i", 0),
            b"\0" * 8,
            struct.pack(">ii", NC_VARIABLE, 1),
            _encode_name(VARIABLE_NAME),
            struct.pack(">iiii", 3, 2, 0, 1),
            b"\0" * 8,
            struct.pack(">ii", NC_DOUBLE, self._vsize),
        ]
        body = b"".join(parts)
        begin = len(body) + 4
        return body + struct.pack(">i", begin)

    def write_frame(self, frame) -> None:
        """Append one frame, given as an (ny, nx) array or a flat sequence of ny*nx values."""
        if self._file is None:
            raise ValueError("writer is closed")
        data = np.asarray(frame, dtype=float)
        if data.shape not in ((self.ny, self.nx), (self.ny * self.nx,)):
            raise ValueError(
                f"frame must have shape ({self.ny}, {self.nx}), got {data.shape}"
            )
        self._file.seek(0, 2)
        self._file.write(data.astype(">f8").tobytes())
        self.frames += 1
        self._file.seek(4)
        self._file.write(struct.pack(">i", self.frames))
        self._file.seek(0, 2)
        self._file.flush()

    def close(self) -> None:
        """Close the file; further writes raise ValueError."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> NetCDFWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def take(self, length: int) -> bytes:
        end = self.pos + length
        if length < 0 or end > len(self.data):
            raise ValueError("truncated NetCDF header")
        chunk = self.data[self.pos : end]
        self.pos = end
        return chunk

    def int32(self) -> int:
        return struct.unpack(">i", self.take(4))[0]

    def uint32(self) -> int:
        return struct.unpack(">I", self.take(4))[0]

    def int64(self) -> int:
        return struct.unpack(">q", self.take(8))[0]

    def name(self) -> str:
        length = self.int32()
        raw = self.take(length)
        self.take(_pad4(length))
        return raw.decode("utf-8")

    def skip_attributes(self) -> None:
        tag, count = self.int32(), self.int32()
        if tag == 0 and count == 0:
            return
        if tag != NC_ATTRIBUTE:
            raise ValueError("malformed attribute list")
        for _ in range(count):
            self.name()
            nc_type = self.int32()
            nvalues = self.int32()
            if nc_type not in _TYPE_SIZES:
                raise ValueError(f"unknown NetCDF type {nc_type}")
            size = _TYPE_SIZES[nc_type] * nvalues
            self.take(size + _pad4(size))


def read_frames(path: str | Path) -> np.ndarray:
    """Read every record of the ``data`` variable as an array of shape (frames, ny, nx)."""
    raw = Path(path).read_bytes()
    if len(raw) < 4 or raw[:3] != MAGIC or raw[3] not in (1, 2):
        raise ValueError("not a classic NetCDF file")
    version = raw[3]
    reader = _Reader(raw)
    reader.take(4)
    numrecs = reader.uint32()

    tag, count = reader.int32(), reader.int32()
    dims: list[tuple[str, int]] = []
    if not (tag == 0 and count == 0):
        if tag != NC_DIMENSION:
            raise ValueError("malformed dimension list")
        dims = [(reader.name(), reader.int32()) for _ in range(count)]

    reader.skip_attributes()

    tag, count = reader.int32(), reader.int32()
    variables = []
    if not (tag == 0 and count == 0):
        if tag != NC_VARIABLE:
            raise ValueError("malformed variable list")
        for _ in range(count):
            name = reader.name()
            ndims = reader.int32()
            dimids = [reader.int32() for _ in range(ndims)]
            if any(not 0 <= d < len(dims) for d in dimids):
                raise ValueError("variable refers to an unknown dimension")
            reader.skip_attributes()
            nc_type = reader.int32()
            vsize = reader.uint32()
            begin = reader.int32() if version == 1 else reader.int64()
            is_record = bool(dimids) and dims[dimids[0]][1] == 0
            variables.append((name, dimids, nc_type, vsize, begin, is_record))

    recsize = sum(v[3] for v in variables if v[5])
    target = next((v for v in variables if v[0] == VARIABLE_NAME), None)
    if target is None:
        raise ValueError(f"no variable named {VARIABLE_NAME!r}")
    _, dimids, nc_type, _, begin, is_record = target
    if not is_record:
        raise ValueError(f"variable {VARIABLE_NAME!r} is not a record variable")
    if nc_type not in _TYPE_DTYPES:
        raise ValueError(f"unknown NetCDF type {nc_type}")

    shape = tuple(dims[d][1] for d in dimids[1:])
    count = prod(shape)
    dtype = np.dtype(_TYPE_DTYPES[nc_type])
    if numrecs == STREAMING:
        numrecs = (len(raw) - begin) // recsize if recsize else 0

    frames = []
    for index in range(numrecs):
        offset = begin + index * recsize
        if offset + count * dtype.itemsize > len(raw):
            raise ValueError("truncated NetCDF data")
        frames.append(np.frombuffer(raw, dtype=dtype, count=count, offset=offset).reshape(shape))
    if not frames:
        return np.zeros((0, *shape))
    return np.stack(frames).astype(float)