"""Pre-render a tile pyramid into the cache.

Renders every tile of the grid overlapping a raster, for a list of zoom
levels, on a thread pool.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Tuple

from ..errors import OutsideBounds, TileError
from ..tile import get_tile
from ..tile_grid import flip_row
from ..utils import vprint

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    rendered: int = 0
    skipped: int = 0
    failed: List[Tuple[int, int, int]] = field(default_factory=list)


def image_extent(source, identifier):
    with source.open(identifier) as handle:
        return source.geometry(handle).extent


def seed(context, source, cache, identifier, zoom_levels, num_workers=4):
    """Render all tiles of ``identifier`` for the given zoom levels.

    Parameters
    ----------
    context : rastertile.config.TileContext
        Grid, row orientation and tile size.
    source : rastertile.readers.RasterSource
        Raster backend.
    cache : rastertile.cache.TileCache
        Cache the tiles are written to; existing tiles are not re-rendered.
    identifier : str
        Raster identifier.
    zoom_levels : list of int
        Zoom levels to generate.
    num_workers : int, optional
        Number of parallel workers, by default 4.

    Returns
    -------
    SeedReport
        Counts of rendered and skipped tiles and the ``(z, x, y)`` that failed.
    """
    report = SeedReport()
    extent = image_extent(source, identifier)

    for zoom in zoom_levels:
        vprint(f"Generating tiles for zoom level {zoom}")
        tiles = []
        for column, row in context.tile_grid.tiles_for_extent(extent, zoom):
            # requests address rows in the client's orientation
            tiles.append((column, flip_row(row, zoom) if context.reverse_y else row))
        vprint(f"Total tiles to generate: {len(tiles)}", level=1)

        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            futures = {
                executor.submit(get_tile, context, source, cache, identifier,
                                zoom, column, row): (column, row)
                for column, row in tiles
            }
            completed = 0
            for future in as_completed(futures):
                completed += 1
                if completed % 100 == 0 or completed == len(tiles):
                    vprint(f"Progress: {completed}/{len(tiles)} tiles", level=1)
                column, row = futures[future]
                try:
                    future.result()
                except OutsideBounds:
                    report.skipped += 1
                except TileError as err:
                    logger.error("Error generating tile %d/%d/%d: %s", zoom, column, row, err)
                    report.failed.append((zoom, column, row))
                else:
                    report.rendered += 1
    return report
