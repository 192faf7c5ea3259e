"""
Image processing modules.

Modules:
    rasterizer - PdfRasterizer renders PDF pages to JPEG
    cropper - RegionCropper cuts bounding-box regions out of page images
    standardizer - ImageStandardizer builds square replacement thumbnails
    encoding - Shared JPEG encode/decode helpers
"""

from .cropper import RegionCropper, box_to_pixels
from .rasterizer import PdfRasterizer
from .standardizer import ImageStandardizer

__all__ = [
    'PdfRasterizer',
    'RegionCropper',
    'ImageStandardizer',
    'box_to_pixels',
]
