"""Two-dimensional wave equation simulation over asyncio-driven tiles, with NetCDF frame output."""

__version__ = "0.1.0"