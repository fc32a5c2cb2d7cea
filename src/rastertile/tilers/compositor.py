"""Assemble the 4-band RGBA tile from the source window.

Band 1 doubles as the nodata indicator: wherever it reads 0 the output
pixel is fully transparent.
"""
import numpy as np

from .window import Resolution

COLOR_BANDS = (1, 2, 3)
ALPHA_BAND = 4
OPAQUE = 255
NODATA = 0


def nodata_alpha(band1: np.ndarray) -> np.ndarray:
    """Alpha channel for a band-1 buffer: 0 where the value is nodata, else 255."""
    alpha = np.full(band1.shape, OPAQUE, dtype=np.uint8)
    alpha[band1 == NODATA] = 0
    return alpha


def composite(source, handle, geometry, resolution: Resolution, tile_size, encoder):
    """Read the color bands and build the RGBA target for one tile.

    Parameters
    ----------
    source : rastertile.readers.RasterSource
        Raster collaborator; does any resampling from window to placement.
    handle : object
        Open dataset handle returned by ``source.open``.
    geometry : rastertile.geometry.RasterGeometry
        Geometry of the open dataset (used for its band count).
    resolution : Resolution
        Window and placement from :func:`rastertile.tilers.window.resolve`.
    tile_size : tuple of int
        Output ``(width, height)``.
    encoder : rastertile.tilers.encoder.PngEncoder
        Target factory and band writer.

    Returns
    -------
    object
        The encoder's target, ready for ``encoder.encode``.
    """
    tw, th = tile_size
    placement = resolution.placement
    output_size = (placement.width, placement.height)
    target = encoder.create_target(tw, th, ALPHA_BAND)

    alpha = None
    for band in COLOR_BANDS:
        # single-band sources are rendered as grayscale
        src_band = min(band, geometry.band_count)
        buf = source.read_band_window(handle, src_band, resolution.window, output_size)
        if band == 1:
            alpha = nodata_alpha(buf)
        encoder.write_band(target, band, placement, buf)
    encoder.write_band(target, ALPHA_BAND, placement, alpha)
    return target
