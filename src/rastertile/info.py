"""Descriptive metadata for a raster: extent and projection details."""
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from .errors import CollaboratorFailure


def projection_info(wkt):
    """Describe a CRS given as WKT.

    Parameters
    ----------
    wkt : str
        Well-known text of the raster CRS.

    Returns
    -------
    dict
        ``wkt``, ``proj4``, ``name``, ``usage`` (area of use in degrees) and
        ``bounds`` (area of use projected into the CRS). ``usage`` and
        ``bounds`` are None when the CRS has no area of use.
    """
    try:
        crs = CRS.from_wkt(wkt)
    except CRSError as err:
        raise CollaboratorFailure(f"Unreadable CRS: {err}") from err

    usage = bounds = None
    area = crs.area_of_use
    if area is not None:
        usage = {"xmin": area.west, "ymin": area.south, "xmax": area.east, "ymax": area.north}
        transformer = Transformer.from_crs("EPSG:4326", crs, always_xy=True)
        xmin, ymin, xmax, ymax = transformer.transform_bounds(
            area.west, area.south, area.east, area.north)
        bounds = {"xmin": xmin, "ymin": ymin, "xmax": xmax, "ymax": ymax}

    return {
        "wkt": crs.to_wkt(pretty=True),
        "proj4": crs.to_proj4(),
        "name": crs.name,
        "usage": usage,
        "bounds": bounds,
    }


def image_info(source, identifier):
    with source.open(identifier) as handle:
        extent = source.geometry(handle).extent
        wkt = source.crs(handle)
    return {
        "extent": extent.as_dict(),
        "projection_info": projection_info(wkt) if wkt else None,
    }
