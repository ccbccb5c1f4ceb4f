[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wave2d"
version = "0.1.0"
description = "Two-dimensional wave equation simulator with tiled domain decomposition and NetCDF frame output"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "wave equation",
    "finite difference",
    "simulation",
    "domain decomposition",
    "netcdf",
    "physics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
wave2d = "wave2d.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["wave2d"]

[tool.hatch.build.targets.sdist]
include = [
    "wave2d",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
