"""Raster sources backed by rasterio.

A raster source opens datasets by identifier, reports their geometry and
reads resampled band windows. Everything rasterio raises is turned into a
``CollaboratorFailure`` at this boundary.
"""
import logging
import pathlib

import numpy as np
import rasterio
from rasterio.enums import Resampling
from rasterio.errors import RasterioError
from rasterio.windows import Window as RasterioWindow

from ..errors import CollaboratorFailure
from ..geometry import RasterGeometry

logger = logging.getLogger(__name__)


class RasterSource:
    """Interface the tile orchestrator expects from a raster backend."""

    def open(self, identifier):
        """Return a handle usable as a context manager."""
        raise NotImplementedError

    def geometry(self, handle) -> RasterGeometry:
        raise NotImplementedError

    def read_band_window(self, handle, band_index, window, output_size) -> np.ndarray:
        """Read ``window`` of a 1-based band resampled to ``(width, height)``."""
        raise NotImplementedError

    def crs(self, handle):
        """WKT of the dataset CRS, or None when it has none."""
        return None


class RasterioSource(RasterSource):
    """Read GeoTIFFs (or anything GDAL opens) from a data directory.

    Parameters
    ----------
    data_dir : str or pathlib.Path
        Directory identifiers are resolved against.
    resampling : str, optional
        Name of a ``rasterio.enums.Resampling`` member, by default "nearest".
    """

    def __init__(self, data_dir=".", resampling="nearest"):
        self.data_dir = pathlib.Path(data_dir).resolve()
        try:
            self.resampling = Resampling[resampling]
        except KeyError:
            raise ValueError(f"Unknown resampling method: {resampling!r}") from None

    def path_for(self, identifier) -> pathlib.Path:
        path = (self.data_dir / identifier).resolve()
        if self.data_dir not in path.parents:
            raise CollaboratorFailure(f"{identifier!r} is outside the data directory")
        return path

    def open(self, identifier):
        path = self.path_for(identifier)
        if not path.is_file():
            raise CollaboratorFailure(f"No such raster: {identifier}")
        try:
            return rasterio.open(path)
        except RasterioError as err:
            raise CollaboratorFailure(f"Could not open {identifier}: {err}") from err

    def geometry(self, handle) -> RasterGeometry:
        tr = handle.transform
        if tr.b != 0 or tr.d != 0:
            raise CollaboratorFailure(f"{handle.name} has a rotated geotransform")
        if tr.e >= 0:
            raise CollaboratorFailure(f"{handle.name} is not north-up")
        return RasterGeometry(
            origin_x=tr.c,
            origin_y=tr.f,
            pixel_size_x=tr.a,
            pixel_size_y=tr.e,
            width=handle.width,
            height=handle.height,
            band_count=handle.count,
        )

    def read_band_window(self, handle, band_index, window, output_size):
        width, height = output_size
        try:
            return handle.read(
                band_index,
                window=RasterioWindow(window.col_off, window.row_off,
                                      window.width, window.height),
                out_shape=(height, width),
                resampling=self.resampling,
                out_dtype="uint8",
            )
        except (RasterioError, IndexError, ValueError) as err:
            raise CollaboratorFailure(
                f"Reading band {band_index} of {handle.name} failed: {err}") from err

    def crs(self, handle):
        if handle.crs is None:
            return None
        return handle.crs.to_wkt()
