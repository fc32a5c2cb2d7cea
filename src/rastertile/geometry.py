"""Planar extents and raster georeferencing.

All coordinates are in the raster's own coordinate reference system; no
reprojection happens here.
"""
from dataclasses import dataclass, asdict
from typing import Tuple


@dataclass(frozen=True)
class Extent:
    """Axis-aligned rectangle ``(xmin, ymin, xmax, ymax)``.

    An extent produced by :meth:`intersect` may be degenerate (empty); that
    is a state to check with :attr:`is_degenerate`, not an error.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def is_degenerate(self) -> bool:
        return self.xmin >= self.xmax or self.ymin >= self.ymax

    def intersect(self, other: "Extent") -> "Extent":
        """Return the overlap of two extents, possibly degenerate."""
        return Extent(
            xmin=max(self.xmin, other.xmin),
            ymin=max(self.ymin, other.ymin),
            xmax=min(self.xmax, other.xmax),
            ymax=min(self.ymax, other.ymax),
        )

    def intersects(self, other: "Extent") -> bool:
        return not self.intersect(other).is_degenerate

    def contains(self, other: "Extent") -> bool:
        return (self.xmin <= other.xmin and self.ymin <= other.ymin
                and self.xmax >= other.xmax and self.ymax >= other.ymax)

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RasterGeometry:
    """North-up affine georeferencing of a raster.

    Parameters
    ----------
    origin_x, origin_y : float
        Coordinates of the top-left corner of the top-left pixel.
    pixel_size_x : float
        Pixel width in CRS units (positive).
    pixel_size_y : float
        Pixel height in CRS units (negative for north-up rasters).
    width, height : int
        Raster size in pixels.
    band_count : int, optional
        Number of bands, by default 1.
    """

    origin_x: float
    origin_y: float
    pixel_size_x: float
    pixel_size_y: float
    width: int
    height: int
    band_count: int = 1

    @property
    def extent(self) -> Extent:
        return Extent(
            xmin=self.origin_x,
            ymin=self.origin_y + self.pixel_size_y * self.height,
            xmax=self.origin_x + self.pixel_size_x * self.width,
            ymax=self.origin_y,
        )

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        """Fractional ``(column, row)`` of a coordinate (inverse affine map)."""
        return ((x - self.origin_x) / self.pixel_size_x,
                (y - self.origin_y) / self.pixel_size_y)
