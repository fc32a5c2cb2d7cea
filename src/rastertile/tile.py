"""Render a single map tile from a georeferenced raster.

The steps for one request are: resolve the tile extent on the grid, read
the raster geometry, work out the source window and output placement,
composite the RGBA tile and encode it. The result is memoized in the tile
cache under the requested ``(source, zoom, column, row)``.
"""
import logging

from .cache import CacheKey
from .config import TileContext
from .tile_grid import flip_row
from .tilers.compositor import composite
from .tilers.encoder import PngEncoder
from .tilers.window import resolve

logger = logging.getLogger(__name__)


def render_tile(context: TileContext, source, identifier, zoom, column, row,
                encoder=None) -> bytes:
    """Render one tile without touching the cache.

    Parameters
    ----------
    context : TileContext
        Grid, row orientation and tile size.
    source : rastertile.readers.RasterSource
        Raster backend.
    identifier : str
        Raster identifier understood by ``source``.
    zoom, column, row : int
        Requested tile, with ``row`` in the client's orientation.
    encoder : PngEncoder, optional
        Encoder collaborator, by default a new PngEncoder.

    Returns
    -------
    bytes
        Encoded tile.

    Raises
    ------
    rastertile.errors.OutsideBounds
        If the tile does not overlap the raster.
    rastertile.errors.CollaboratorFailure
        If reading or encoding fails.
    """
    encoder = encoder or PngEncoder()
    if context.reverse_y:
        row = flip_row(row, zoom)
    tile_extent = context.tile_grid.tile_extent(column, row, zoom)
    with source.open(identifier) as handle:
        geometry = source.geometry(handle)
        resolution = resolve(tile_extent, geometry, context.tile_size)
        target = composite(source, handle, geometry, resolution,
                           context.tile_size, encoder)
    return encoder.encode(target)


def get_tile(context: TileContext, source, cache, identifier, zoom, column, row,
             encoder=None) -> bytes:
    """Return the encoded tile, from the cache when already rendered."""
    key = CacheKey(identifier, zoom, column, row)

    def compute():
        logger.debug("rendering %s/%d/%d/%d", identifier, zoom, column, row)
        return render_tile(context, source, identifier, zoom, column, row, encoder)

    return cache.lookup_or_compute(key, compute)
