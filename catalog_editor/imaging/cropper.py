"""
Region Cropper

Cuts a product photo out of a page raster given a normalized bounding box.
"""

import logging
import math
from numbers import Real
from typing import Optional, Sequence, Tuple

from .encoding import encode_jpeg, open_image

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def box_to_pixels(
    box: Sequence[float],
    width: int,
    height: int,
) -> Optional[Tuple[int, int, int, int]]:
    """
    Convert a normalized (ymin, xmin, ymax, xmax) box to a pixel rectangle.

    Coordinates are clamped to [0, 1]. Boxes that are inverted or smaller
    than one pixel after clamping are rejected.

    Args:
        box: Four normalized coordinates
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        (left, top, right, bottom) for PIL's Image.crop, or None
    """
    if box is None or isinstance(box, (str, bytes)) or len(box) != 4:
        return None
    if not all(isinstance(v, Real) and not isinstance(v, bool) and math.isfinite(v) for v in box):
        return None

    ymin, xmin, ymax, xmax = (_clamp(float(v)) for v in box)

    left = int(round(xmin * width))
    top = int(round(ymin * height))
    right = int(round(xmax * width))
    bottom = int(round(ymax * height))

    if right - left < 1 or bottom - top < 1:
        return None
    return left, top, right, bottom


class RegionCropper:
    """
    Extracts product thumbnails from page images.

    Usage:
        cropper = RegionCropper(jpeg_quality=80)
        thumbnail = cropper.crop(page_jpeg, (0.1, 0.2, 0.4, 0.5))
    """

    def __init__(self, jpeg_quality: int = 80):
        self.jpeg_quality = jpeg_quality

    def crop(self, page_image: bytes, box: Optional[Sequence[float]]) -> Optional[bytes]:
        """
        Crop a region from a page raster.

        Args:
            page_image: Encoded page image
            box: Normalized (ymin, xmin, ymax, xmax)

        Returns:
            JPEG bytes of the region, or None when the box is malformed,
            degenerate, or the image cannot be decoded
        """
        if box is None or isinstance(box, (str, bytes)) or len(box) != 4:
            logger.debug("Skipping crop, malformed box: %r", box)
            return None

        try:
            image = open_image(page_image)
        except OSError as e:
            logger.warning("Could not decode page image for cropping: %s", e)
            return None

        rect = box_to_pixels(box, image.width, image.height)
        if rect is None:
            logger.debug("Skipping crop, degenerate box %r on %dx%d page",
                         box, image.width, image.height)
            return None

        try:
            return encode_jpeg(image.crop(rect), self.jpeg_quality)
        except (OSError, ValueError) as e:
            logger.warning("Could not encode cropped region %r: %s", rect, e)
            return None
