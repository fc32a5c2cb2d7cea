"""Source window and destination placement for a single tile.

Given a tile extent and the geometry of a source raster, work out which
source pixels to read and where they land inside the fixed-size output
tile when the tile only partially overlaps the image.

All rounding goes through :func:`round_half_away` so that the read window
and the paddings agree with each other. Adjacent tiles line up in the
common case, but seams are not guaranteed to be pixel exact at every
fractional offset.
"""
import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Tuple

from ..errors import OutsideBounds
from ..geometry import Extent, RasterGeometry

logger = logging.getLogger(__name__)


class Window(NamedTuple):
    """Sub-rectangle of the source raster, in source pixels."""
    col_off: int
    row_off: int
    width: int
    height: int


class Placement(NamedTuple):
    """Where the window lands in the output tile, in destination pixels."""
    offset_x: int
    offset_y: int
    width: int
    height: int


class Padding(NamedTuple):
    left: int
    top: int
    right: int
    bottom: int


@dataclass(frozen=True)
class Resolution:
    window: Window
    placement: Placement
    padding: Padding
    intersection: Extent


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's ``round`` rounds halves to even, which would make ``0.5`` and
    ``1.5`` disagree about direction.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def resolve(tile_extent: Extent, geometry: RasterGeometry,
            tile_size: Tuple[int, int]) -> Resolution:
    """Compute the read window and output placement for one tile.

    Parameters
    ----------
    tile_extent : Extent
        Extent of the requested tile, in the raster's CRS.
    geometry : RasterGeometry
        Georeferencing of the source raster.
    tile_size : tuple of int
        Output tile ``(width, height)`` in pixels.

    Returns
    -------
    Resolution
        Source window, destination placement and the source-pixel padding.

    Raises
    ------
    OutsideBounds
        If the tile does not overlap the image, or the overlap is too thin
        to cover a single pixel once rounded.
    """
    tw, th = tile_size
    sx, sy = geometry.pixel_size_x, geometry.pixel_size_y
    image = geometry.extent
    inter = tile_extent.intersect(image)
    if inter.is_degenerate:
        raise OutsideBounds()

    px0, py0 = geometry.to_pixel(inter.xmin, inter.ymin)
    px1, py1 = geometry.to_pixel(inter.xmax, inter.ymax)
    col0, col1 = round_half_away(px0), round_half_away(px1)
    row_top, row_bottom = round_half_away(py1), round_half_away(py0)
    window = Window(col0, row_top, col1 - col0, row_bottom - row_top)

    padding = Padding(
        left=round_half_away((inter.xmin - tile_extent.xmin) / sx),
        top=round_half_away((inter.ymax - tile_extent.ymax) / sy),
        right=round_half_away((tile_extent.xmax - inter.xmax) / sx),
        bottom=round_half_away((tile_extent.ymin - inter.ymin) / sy),
    )

    # scale source-pixel padding into the fixed output grid
    x_ratio = tw / ((tile_extent.xmax - tile_extent.xmin) / sx)
    y_ratio = th / ((tile_extent.ymin - tile_extent.ymax) / sy)
    left = round_half_away(padding.left * x_ratio)
    top = round_half_away(padding.top * y_ratio)
    right = round_half_away(padding.right * x_ratio)
    bottom = round_half_away(padding.bottom * y_ratio)
    placement = Placement(left, top, tw - left - right, th - top - bottom)

    logger.debug("window %s placement %s padding %s", window, placement, padding)
    if min(window.width, window.height, placement.width, placement.height) <= 0:
        raise OutsideBounds("tile overlaps the image by less than a pixel")
    return Resolution(window, placement, padding, inter)
