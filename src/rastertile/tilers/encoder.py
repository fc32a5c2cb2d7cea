"""PNG encoding of composited tiles with Pillow."""
import io

import numpy as np
from PIL import Image

from ..errors import CollaboratorFailure


class PngEncoder:
    """Build a zeroed RGBA target, fill it band by band, encode it as PNG.

    The target is a ``(height, width, bands)`` uint8 array, so pixels never
    written to stay transparent black.
    """

    format = "PNG"
    media_type = "image/png"

    def create_target(self, width, height, band_count=4):
        return np.zeros((height, width, band_count), dtype=np.uint8)

    def write_band(self, target, band_index, placement, buffer):
        """Write ``buffer`` into 1-based band ``band_index`` at ``placement``."""
        x, y, w, h = placement
        buffer = np.asarray(buffer)
        if buffer.shape != (h, w):
            raise CollaboratorFailure(
                f"band {band_index} buffer has shape {buffer.shape}, expected {(h, w)}")
        target[y:y + h, x:x + w, band_index - 1] = buffer

    def encode(self, target) -> bytes:
        buf = io.BytesIO()
        try:
            Image.fromarray(np.ascontiguousarray(target)).save(buf, format=self.format)
        except (ValueError, TypeError, OSError) as err:
            raise CollaboratorFailure(f"PNG encoding failed: {err}") from err
        return buf.getvalue()
