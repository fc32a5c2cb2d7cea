"""Serve georeferenced rasters as zoom/column/row map tiles."""

from . import config
from .cache import CacheKey, TileCache
from .config import TileContext
from .errors import CollaboratorFailure, OutsideBounds, StorageFailure, TileError
from .geometry import Extent, RasterGeometry
from .tile import get_tile, render_tile
from .tile_grid import TileCoordinate, TileGrid

__version__ = "0.1.0"
