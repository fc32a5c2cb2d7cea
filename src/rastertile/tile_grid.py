"""Tile grid addressing.

A TileGrid partitions a fixed global extent into ``2**zoom x 2**zoom``
equal cells per zoom level. Row 0 sits at the bottom (``ymin``) of the
extent; clients using top-origin rows flip them with :func:`flip_row`.
"""
import math
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Tuple

import mercantile

from .geometry import Extent

# deepest zoom addressable through the tile routes
MAX_ZOOM = 255


class TileCoordinate(NamedTuple):
    zoom: int
    column: int
    row: int


def flip_row(row: int, zoom: int) -> int:
    """Convert between top-origin and bottom-origin row numbering."""
    return (1 << zoom) - 1 - row


@dataclass(frozen=True)
class TileGrid:
    """Quad-tree tile scheme over a rectangular global extent."""

    extent: Extent

    @classmethod
    def web_mercator(cls) -> "TileGrid":
        """The square EPSG:3857 world grid used by slippy map clients."""
        bounds = mercantile.xy_bounds(0, 0, 0)
        return cls(Extent(bounds.left, bounds.bottom, bounds.right, bounds.top))

    def cell_size(self, zoom: int) -> Tuple[float, float]:
        n = 1 << zoom
        return self.extent.width / n, self.extent.height / n

    def tile_extent(self, column: int, row: int, zoom: int) -> Extent:
        """Return the extent of one grid cell.

        No bounds checking is done: indices outside ``[0, 2**zoom)`` give a
        valid extent lying outside the global extent.

        Parameters
        ----------
        column : int
            Cell index along x, counted from ``xmin``.
        row : int
            Cell index along y, counted from ``ymin``.
        zoom : int
            Zoom level (>= 0).

        Returns
        -------
        Extent
            The cell's extent in grid CRS units.
        """
        tile_w, tile_h = self.cell_size(zoom)
        return Extent(
            xmin=self.extent.xmin + tile_w * column,
            ymin=self.extent.ymin + tile_h * row,
            xmax=self.extent.xmin + tile_w * (column + 1),
            ymax=self.extent.ymin + tile_h * (row + 1),
        )

    def tiles_for_extent(self, extent: Extent, zoom: int) -> Iterator[Tuple[int, int]]:
        """Yield ``(column, row)`` of every cell overlapping ``extent``."""
        overlap = self.extent.intersect(extent)
        if overlap.is_degenerate:
            return
        n = 1 << zoom
        tile_w, tile_h = self.cell_size(zoom)
        col0 = max(0, math.floor((overlap.xmin - self.extent.xmin) / tile_w))
        col1 = min(n - 1, math.ceil((overlap.xmax - self.extent.xmin) / tile_w) - 1)
        row0 = max(0, math.floor((overlap.ymin - self.extent.ymin) / tile_h))
        row1 = min(n - 1, math.ceil((overlap.ymax - self.extent.ymin) / tile_h) - 1)
        for column in range(col0, col1 + 1):
            for row in range(row0, row1 + 1):
                if self.tile_extent(column, row, zoom).intersects(extent):
                    yield column, row
