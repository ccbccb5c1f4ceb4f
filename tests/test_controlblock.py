import json

import pytest

from wave2d.controlblock import ControlBlock, parse_args


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(directory, data, name="run.config"):
    (directory / name).write_text(json.dumps(data))
    return name


def test_defaults_when_config_missing(workdir):
    cb = parse_args(["-c", "missing.config"])
    assert cb.config is None
    assert cb.config_file_name == "missing.config"
    assert (cb.m, cb.n, cb.niters) == (100, 100, 100)
    assert (cb.px, cb.py, cb.stats_freq, cb.plot_freq) == (1, 1, 0, 0)


def test_values_read_from_config(workdir):
    name = write_config(workdir, {"-n": 50, "-i": 7, "-x": 2, "-y": 3})
    cb = parse_args(["-c", name])
    assert cb.config == {"-n": 50, "-i": 7, "-x": 2, "-y": 3}
    assert (cb.m, cb.n, cb.niters, cb.px, cb.py) == (50, 50, 7, 2, 3)


def test_command_line_overrides_config(workdir):
    name = write_config(workdir, {"-n": 50, "-i": 7, "-x": 2, "-y": 3})
    cb = parse_args(["-c", name, "-n", "20", "-i", "5", "-x", "4", "-y", "1"])
    assert (cb.m, cb.n, cb.niters, cb.px, cb.py) == (20, 20, 5, 4, 1)


def test_stats_and_plot_frequencies(workdir):
    cb = parse_args(["-c", "none", "-s", "3", "-p", "9", "-k"])
    assert cb.stats_freq == 3
    assert cb.plot_freq == 9


def test_invalid_json_gives_no_config(workdir):
    (workdir / "bad.config").write_text("{not json")
    cb = parse_args(["-c", "bad.config", "-n", "12"])
    assert cb.config is None
    assert cb.n == 12


def test_non_unsigned_config_values_are_ignored(workdir):
    name = write_config(workdir, {"-n": -4, "-i": 2.5, "-x": True, "-y": "3"})
    cb = parse_args(["-c", name])
    assert (cb.n, cb.niters, cb.px, cb.py) == (100, 100, 1, 1)


def test_config_objects_are_kept(workdir):
    objects = [{"type": "sine", "row": 1, "col": 2}]
    name = write_config(workdir, {"objects": objects})
    cb = parse_args(["-c", name])
    assert cb.config["objects"] == objects


def test_negative_option_is_rejected(workdir):
    with pytest.raises(SystemExit):
        parse_args(["-c", "x", "-n", "-3"])


def test_non_numeric_option_is_rejected(workdir):
    with pytest.raises(SystemExit):
        parse_args(["-c", "x", "-i", "many"])


def test_config_option_is_required(workdir):
    with pytest.raises(SystemExit):
        parse_args(["-n", "10"])


def test_direct_construction_defaults():
    cb = ControlBlock(m=8, n=6)
    assert (cb.m, cb.n, cb.px, cb.py, cb.niters) == (8, 6, 1, 1, 100)