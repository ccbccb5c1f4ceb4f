"""Run configuration: command-line options merged over a JSON config file."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

DEFAULT_SIZE = 100
DEFAULT_ITERATIONS = 100


def _default_program_path() -> Path:
    return Path(sys.argv[0]).resolve()


@dataclass
class ControlBlock:
    """Settings shared by every tile of the simulation."""

    program_path: Path = field(default_factory=_default_program_path)
    config_file_name: str = ""
    config: Any = None
    m: int = DEFAULT_SIZE
    n: int = DEFAULT_SIZE
    stats_freq: int = 0
    plot_freq: int = 0
    px: int = 1
    py: int = 1
    niters: int = DEFAULT_ITERATIONS


def _unsigned(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="controlblock")
    parser.add_argument("-c", dest="config", required=True, help="config file name")
    parser.add_argument("-n", dest="n", type=_unsigned)
    parser.add_argument("-i", dest="niters", type=_unsigned)
    parser.add_argument("-s", dest="stats_freq", type=_unsigned)
    parser.add_argument("-p", dest="plot", type=_unsigned)
    parser.add_argument("-x", dest="px", type=_unsigned)
    parser.add_argument("-y", dest="py", type=_unsigned)
    parser.add_argument("-k", dest="nocomm", action="store_true")
    return parser


def _load_config(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, ValueError):
        return None


def _config_uint(config: dict, key: str) -> int | None:
    value = config.get(key)
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def parse_args(argv: Sequence[str] | None = None) -> ControlBlock:
    """Build a ControlBlock from command-line arguments (without the program name).

    Values in the JSON config file are applied first; options given on the
    command line override them. A missing or malformed config file leaves
    ``config`` as None.
    """
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else list(argv))

    config_file_name = args.config
    config = _load_config(Path.cwd() / config_file_name)

    m = n = DEFAULT_SIZE
    niters = DEFAULT_ITERATIONS
    stats_freq = plot_freq = 0
    px = py = 1

    if isinstance(config, dict):
        if (value := _config_uint(config, "-n")) is not None:
            n = m = value
        if (value := _config_uint(config, "-i")) is not None:
            niters = value
        if (value := _config_uint(config, "-x")) is not None:
            px = value
        if (value := _config_uint(config, "-y")) is not None:
            py = value

    if args.n is not None:
        n = m = args.n
    if args.niters is not None:
        niters = args.niters
    if args.stats_freq is not None:
        stats_freq = args.stats_freq
    if args.plot is not None:
        plot_freq = args.plot
    if args.px is not None:
        px = args.px
    if args.py is not None:
        py = args.py

    return ControlBlock(
        program_path=_default_program_path(),
        config_file_name=config_file_name,
        config=config,
        m=m,
        n=n,
        stats_freq=stats_freq,
        plot_freq=plot_freq,
        px=px,
        py=py,
        niters=niters,
    )