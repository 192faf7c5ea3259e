"""
Image Standardizer

Turns a user-supplied photo into a fixed-size square JPEG thumbnail.
"""

import logging
from typing import Optional

from PIL import Image

from .encoding import WHITE, encode_jpeg, open_image

logger = logging.getLogger(__name__)


class ImageStandardizer:
    """
    Center-crops, resizes and flattens replacement product photos.

    Usage:
        standardizer = ImageStandardizer(size=300)
        thumbnail = standardizer.standardize(uploaded_bytes)
        if thumbnail is None:
            ...  # treat as "no image"
    """

    def __init__(self, size: int = 300, jpeg_quality: int = 85):
        """
        Args:
            size: Edge length of the square output in pixels
            jpeg_quality: JPEG quality of the output
        """
        self.size = size
        self.jpeg_quality = jpeg_quality

    def standardize(self, data: bytes) -> Optional[bytes]:
        """
        Produce a size x size JPEG from arbitrary image bytes.

        Returns:
            JPEG bytes, or None if the input cannot be decoded
        """
        if not data:
            return None

        try:
            image = open_image(data)
        except (OSError, ValueError) as e:
            logger.warning("Could not decode replacement image: %s", e)
            return None

        width, height = image.size
        edge = min(width, height)
        if edge < 1:
            return None

        left = (width - edge) // 2
        top = (height - edge) // 2
        square = image.crop((left, top, left + edge, top + edge))

        if square.mode not in ("RGB", "RGBA"):
            square = square.convert("RGBA")
        square = square.resize((self.size, self.size), Image.LANCZOS)

        canvas = Image.new("RGB", (self.size, self.size), WHITE)
        if square.mode == "RGBA":
            canvas.paste(square, mask=square.getchannel("A"))
        else:
            canvas.paste(square)

        try:
            return encode_jpeg(canvas, self.jpeg_quality)
        except (OSError, ValueError) as e:
            logger.warning("Could not encode thumbnail: %s", e)
            return None
