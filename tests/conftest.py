"""Shared pytest fixtures for rastertile tests."""

import contextlib
import tempfile
from pathlib import Path

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin

from rastertile.config import TileContext
from rastertile.geometry import Extent, RasterGeometry
from rastertile.readers import RasterSource
from rastertile.tile_grid import TileGrid


class ArraySource(RasterSource):
    """In-memory raster source with nearest-neighbour resampling.

    Records every identifier opened so tests can check whether the
    raster was touched at all.
    """

    def __init__(self, data, geometry):
        self.data = np.asarray(data, dtype=np.uint8)
        self._geometry = geometry
        self.opened = []

    def open(self, identifier):
        self.opened.append(identifier)
        return contextlib.nullcontext(identifier)

    def geometry(self, handle):
        return self._geometry

    def read_band_window(self, handle, band_index, window, output_size):
        col, row, w, h = window
        out_w, out_h = output_size
        block = self.data[band_index - 1, row:row + h, col:col + w]
        rows = (np.arange(out_h) * h) // out_h
        cols = (np.arange(out_w) * w) // out_w
        return block[np.ix_(rows, cols)]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def square_grid():
    """Grid over [0, 0] - [1000, 1000]."""
    return TileGrid(Extent(0.0, 0.0, 1000.0, 1000.0))


@pytest.fixture
def square_geometry():
    """1000 x 1000 pixel north-up image covering the square grid exactly."""
    return RasterGeometry(0.0, 1000.0, 1.0, -1.0, 1000, 1000, band_count=3)


@pytest.fixture
def small_context():
    """256 px tiles over a [0, 0] - [256, 256] grid, bottom-origin rows."""
    return TileContext(TileGrid(Extent(0.0, 0.0, 256.0, 256.0)))


@pytest.fixture
def make_source():
    """Factory for in-memory raster sources."""
    def factory(data, geometry):
        return ArraySource(data, geometry)
    return factory


@pytest.fixture
def halves_source():
    """256 x 256 three-band image: top half value 10, bottom half value 200."""
    data = np.empty((3, 256, 256), dtype=np.uint8)
    data[:, :128, :] = 10
    data[:, 128:, :] = 200
    geometry = RasterGeometry(0.0, 256.0, 1.0, -1.0, 256, 256, band_count=3)
    return ArraySource(data, geometry)


@pytest.fixture
def geotiff(temp_dir):
    """Write a 100 x 100 three-band UTM 28N GeoTIFF covering [0, 0] - [100, 100].

    Band 1 is zero (nodata) in the left ten columns.
    """
    data = np.full((3, 100, 100), 120, dtype=np.uint8)
    data[1] = 60
    data[2] = 30
    data[0, :, :10] = 0
    path = temp_dir / "image.tif"
    with rasterio.open(
        path, "w", driver="GTiff", width=100, height=100, count=3,
        dtype="uint8", crs="EPSG:32628", transform=from_origin(0, 100, 1, 1),
    ) as dst:
        dst.write(data)
    return path


@pytest.fixture
def geotiff_context():
    """Context whose grid matches the GeoTIFF fixture's extent."""
    return TileContext(TileGrid(Extent(0.0, 0.0, 100.0, 100.0)))
