"""Raster sources for tile rendering.

This package contains the raster backends the tile orchestrator reads
georeferenced imagery through.
"""

from .raster import RasterSource, RasterioSource

__all__ = ["RasterSource", "RasterioSource"]
