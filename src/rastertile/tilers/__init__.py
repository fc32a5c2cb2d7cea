"""Tile geometry, compositing and encoding.

This package contains the window resolver, the RGBA compositor, the PNG
encoder and the pyramid seeder.
"""

from .window import Window, Placement, Padding, Resolution, resolve, round_half_away
from .compositor import composite, nodata_alpha
from .encoder import PngEncoder
