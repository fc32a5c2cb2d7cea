"""Error taxonomy for tile rendering.

``OutsideBounds`` is a legitimate "no content" outcome and maps to a 404;
every other ``TileError`` is an internal failure.
"""


class TileError(Exception):
    """Base class for all tile rendering failures."""


class OutsideBounds(TileError):
    """The tile and the image extents do not overlap."""

    def __init__(self, message="tile is outside image bounds"):
        super().__init__(message)


class CollaboratorFailure(TileError):
    """Opening, reading or encoding raster data failed."""


class StorageFailure(TileError):
    """Reading or writing the tile cache failed."""
