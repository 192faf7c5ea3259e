"""
PDF Rasterizer

Renders each page of an uploaded PDF to a JPEG image for analysis by the
extraction model.
"""

import logging
from typing import List

import pypdfium2 as pdfium

from ..exceptions import DocumentError
from .encoding import encode_jpeg

logger = logging.getLogger(__name__)


class PdfRasterizer:
    """
    Converts PDF pages to JPEG rasters.

    Usage:
        rasterizer = PdfRasterizer(scale=1.5, jpeg_quality=80)
        pages = rasterizer.rasterize(pdf_bytes)
    """

    def __init__(self, scale: float = 1.5, jpeg_quality: int = 80):
        """
        Initialize the rasterizer.

        Args:
            scale: Render scale relative to 72 dpi (1.5 keeps text legible
                while bounding memory)
            jpeg_quality: JPEG quality for page images (kept low, the
                images are only used for automated analysis)
        """
        self.scale = scale
        self.jpeg_quality = jpeg_quality

    def _open(self, pdf_bytes: bytes) -> pdfium.PdfDocument:
        if not pdf_bytes:
            raise DocumentError("Empty PDF file")
        try:
            return pdfium.PdfDocument(pdf_bytes)
        except pdfium.PdfiumError as e:
            raise DocumentError(f"Could not open PDF: {e}") from e

    def page_count(self, pdf_bytes: bytes) -> int:
        """Return the number of pages without rendering them."""
        pdf = self._open(pdf_bytes)
        try:
            return len(pdf)
        finally:
            pdf.close()

    def rasterize(self, pdf_bytes: bytes) -> List[bytes]:
        """
        Render all pages in document order.

        Args:
            pdf_bytes: Raw PDF file content

        Returns:
            One JPEG per page, page 1 first

        Raises:
            DocumentError: If the file is not a PDF or any page fails to render
        """
        pdf = self._open(pdf_bytes)
        images: List[bytes] = []
        try:
            for index in range(len(pdf)):
                page = pdf[index]
                try:
                    bitmap = page.render(scale=self.scale)
                    images.append(encode_jpeg(bitmap.to_pil(), self.jpeg_quality))
                except (pdfium.PdfiumError, OSError, ValueError) as e:
                    raise DocumentError(f"Could not render page {index + 1}: {e}") from e
                finally:
                    page.close()
        finally:
            pdf.close()

        logger.info("Rasterized %d pages at scale %.1f", len(images), self.scale)
        return images
