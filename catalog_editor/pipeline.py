"""
Page-Processing Pipeline

Turns an uploaded PDF into catalog products:
rasterize -> extract (per page) -> crop thumbnails -> append to the store.

Features:
- Strictly sequential, one page at a time, in document order
- Products appended after every page so results appear incrementally
- A failed page contributes zero products and the run continues
- Status callbacks for progress display
"""

import logging
import uuid
from typing import Callable, List, Optional

from .catalog import CatalogStore
from .common.constants import MSG_ANALYZING, MSG_COMPLETE, MSG_ERROR, MSG_READING
from .exceptions import CatalogEditorError, ConfigurationError
from .models import ExtractionCandidate, ProcessingStatus, ProcessingStep, Product

logger = logging.getLogger(__name__)

StatusCallback = Callable[[ProcessingStatus], None]


def new_product_id() -> str:
    """Generate an opaque, unique product identifier."""
    return f"prod-{uuid.uuid4().hex}"


class CatalogPipeline:
    """
    Headless upload pipeline with injected collaborators.

    Args:
        rasterizer: Object with rasterize(pdf_bytes) -> list of page JPEGs
        extractor: Object with extract_page(page_jpeg) -> list of ExtractionCandidate
        cropper: Object with crop(page_jpeg, box) -> JPEG bytes or None
        store: CatalogStore receiving the products
        id_factory: Callable producing unique product ids

    Usage:
        pipeline = CatalogPipeline(PdfRasterizer(), client, RegionCropper(), store)
        status = pipeline.process(pdf_bytes, "lista.pdf", on_status=print)
    """

    def __init__(
        self,
        rasterizer,
        extractor,
        cropper,
        store: CatalogStore,
        id_factory: Callable[[], str] = new_product_id,
    ):
        self.rasterizer = rasterizer
        self.extractor = extractor
        self.cropper = cropper
        self.store = store
        self.id_factory = id_factory

        self.pages_processed = 0
        self.pages_failed = 0
        self.products_added = 0

    def build_product(self, page_image: bytes, candidate: ExtractionCandidate) -> Product:
        """Create a product from a candidate, cropping its photo when the box is valid."""
        image = None
        if candidate.bounding_box is not None:
            image = self.cropper.crop(page_image, candidate.bounding_box)

        price = max(0, int(candidate.original_price or 0))
        return Product(
            id=self.id_factory(),
            name=candidate.name,
            original_price=price,
            updated_price=price,
            image=image,
        )

    def extract_candidates(self, page_number: int, page_image: bytes) -> List[ExtractionCandidate]:
        """
        Run extraction for one page.

        Any failure other than a missing credential is logged and yields
        no candidates, so later pages are still processed.
        """
        try:
            return list(self.extractor.extract_page(page_image))
        except ConfigurationError:
            raise
        except Exception as e:
            self.pages_failed += 1
            logger.error("Extraction failed on page %d: %s: %s",
                         page_number, type(e).__name__, e)
            return []

    def process_page(self, page_number: int, page_image: bytes) -> List[Product]:
        """Extract, crop and append the products of one page."""
        candidates = self.extract_candidates(page_number, page_image)
        products = [self.build_product(page_image, c) for c in candidates]

        self.store.append(products)
        self.pages_processed += 1
        self.products_added += len(products)

        with_images = sum(1 for p in products if p.has_image)
        logger.info("Page %d: %d products (%d with photo)", page_number, len(products), with_images)
        return products

    def process(
        self,
        pdf_bytes: bytes,
        file_name: str,
        on_status: Optional[StatusCallback] = None,
    ) -> ProcessingStatus:
        """
        Process a whole PDF and append its products to the store.

        Args:
            pdf_bytes: Uploaded file content
            file_name: Original file name (persisted with the catalog)
            on_status: Called with every status change

        Returns:
            Final status: COMPLETE, or ERROR when the document could not be
            read or no API key is configured
        """
        def emit(status: ProcessingStatus) -> ProcessingStatus:
            if on_status is not None:
                on_status(status)
            return status

        self.pages_processed = 0
        self.pages_failed = 0
        self.products_added = 0

        self.store.set_file_name(file_name)
        emit(ProcessingStatus(ProcessingStep.READING, MSG_READING))

        try:
            ensure_configured = getattr(self.extractor, "ensure_configured", None)
            if ensure_configured is not None:
                ensure_configured()

            pages = self.rasterizer.rasterize(pdf_bytes)
            total = len(pages)
            logger.info("Processing %s: %d pages", file_name, total)

            for index, page_image in enumerate(pages, 1):
                emit(ProcessingStatus(
                    ProcessingStep.ANALYZING,
                    MSG_ANALYZING.format(current=index, total=total),
                    progress=index,
                    total=total,
                ))
                self.process_page(index, page_image)

        except CatalogEditorError as e:
            logger.error("Processing %s aborted: %s", file_name, e)
            return emit(ProcessingStatus(ProcessingStep.ERROR, MSG_ERROR))

        logger.info("Finished %s: %d products from %d pages (%d pages failed)",
                    file_name, self.products_added, self.pages_processed, self.pages_failed)
        return emit(ProcessingStatus(ProcessingStep.COMPLETE, MSG_COMPLETE))

    def get_stats(self) -> dict:
        """Return statistics for the last run."""
        return {
            'pages_processed': self.pages_processed,
            'pages_failed': self.pages_failed,
            'products_added': self.products_added,
        }
