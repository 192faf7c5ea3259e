"""
Catalog PDF Exporter

Renders the current catalog as a printable price list: a grid table with
one row per product (photo, name, base price, final price).
"""

import io
import logging
import os
from datetime import date
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from ..common.constants import EXPORT_FILE_NAME
from ..common.price_utils import format_pyg
from ..models import Product

logger = logging.getLogger(__name__)

HEADERS = ('Foto', 'Producto', 'Precio Base', 'Precio Final')

# Layout in millimetres (A4 portrait)
MARGIN = 14
HEADER_HEIGHT = 10
ROW_HEIGHT = 25
PHOTO_SIZE = 20
PHOTO_PADDING = 2.5
COLUMN_WIDTHS = (25, 87, 35, 35)

HEADER_FILL = (15, 23, 42)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def to_latin1(text: str) -> str:
    """Core PDF fonts are latin-1 only; replace anything else."""
    return text.encode('latin-1', 'replace').decode('latin-1')


class CatalogPdfExporter:
    """
    Exports products to a PDF price list.

    Usage:
        exporter = CatalogPdfExporter()
        pdf_bytes = exporter.render(store.products)
        exporter.export(store.products, "output/Catalogo_Lattafa_PYG_Fotos.pdf")
    """

    def __init__(
        self,
        title: str = "Catálogo de Precios Actualizado",
        file_name: str = EXPORT_FILE_NAME,
    ):
        """
        Initialize the exporter.

        Args:
            title: Document heading
            file_name: Default download file name
        """
        self.title = title
        self.file_name = file_name
        self.images_embedded = 0
        self.images_failed = 0

    def product_to_row(self, product: Product) -> Tuple[str, str, str]:
        """
        Convert product to the text cells of a table row.

        Returns:
            (name, formatted base price, formatted final price)
        """
        return (
            product.name,
            format_pyg(product.original_price),
            format_pyg(product.updated_price),
        )

    def table_rows(self, products: Sequence[Product]) -> List[Tuple[str, str, str]]:
        """Text cells of every row, in catalog order."""
        return [self.product_to_row(p) for p in products]

    def _fit_text(self, pdf: FPDF, text: str, width: float) -> str:
        """Shorten text with an ellipsis until it fits in the cell."""
        text = to_latin1(text)
        if pdf.get_string_width(text) <= width:
            return text
        while text and pdf.get_string_width(text + '...') > width:
            text = text[:-1]
        return text.rstrip() + '...'

    def _draw_header(self, pdf: FPDF) -> None:
        pdf.set_font('Helvetica', 'B', 10)
        pdf.set_fill_color(*HEADER_FILL)
        pdf.set_text_color(*WHITE)
        for label, width in zip(HEADERS, COLUMN_WIDTHS):
            pdf.cell(width, HEADER_HEIGHT, label, border=1, align='C', fill=True)
        pdf.ln(HEADER_HEIGHT)
        pdf.set_text_color(*BLACK)

    def _draw_photo(self, pdf: FPDF, product: Product, x: float, y: float) -> None:
        if not product.image:
            return
        try:
            pdf.image(
                io.BytesIO(product.image),
                x=x + PHOTO_PADDING,
                y=y + PHOTO_PADDING,
                w=PHOTO_SIZE,
                h=PHOTO_SIZE,
            )
            self.images_embedded += 1
        except Exception as e:
            self.images_failed += 1
            logger.error("Error adding image to PDF for %s: %s", product.id, e)

    def _draw_row(self, pdf: FPDF, product: Product) -> None:
        name, base_price, final_price = self.product_to_row(product)
        photo_w, name_w, base_w, final_w = COLUMN_WIDTHS
        x, y = pdf.get_x(), pdf.get_y()

        pdf.set_font('Helvetica', '', 10)
        pdf.cell(photo_w, ROW_HEIGHT, '', border=1)
        pdf.cell(name_w, ROW_HEIGHT, self._fit_text(pdf, name, name_w - 2), border=1)
        pdf.cell(base_w, ROW_HEIGHT, base_price, border=1, align='R')
        pdf.set_font('Helvetica', 'B', 10)
        pdf.cell(final_w, ROW_HEIGHT, final_price, border=1, align='R')
        pdf.ln(ROW_HEIGHT)

        self._draw_photo(pdf, product, x, y)

    def render(self, products: Sequence[Product], generated_on: Optional[date] = None) -> bytes:
        """
        Render the price list.

        Args:
            products: Products in catalog order
            generated_on: Date printed under the title (default: today)

        Returns:
            PDF file content
        """
        generated_on = generated_on or date.today()
        self.images_embedded = 0
        self.images_failed = 0

        pdf = FPDF(orientation='P', unit='mm', format='A4')
        pdf.set_margins(MARGIN, MARGIN, MARGIN)
        pdf.set_auto_page_break(auto=False, margin=MARGIN)
        pdf.add_page()

        pdf.set_font('Helvetica', 'B', 18)
        pdf.cell(0, 10, to_latin1(self.title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font('Helvetica', '', 12)
        pdf.cell(0, 8, f"Generado: {generated_on.strftime('%d/%m/%Y')}",
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(2)

        self._draw_header(pdf)
        page_bottom = pdf.h - MARGIN
        for product in products:
            if pdf.get_y() + ROW_HEIGHT > page_bottom:
                pdf.add_page()
                self._draw_header(pdf)
            self._draw_row(pdf, product)

        logger.info("Rendered PDF with %d products (%d photos, %d failed)",
                    len(products), self.images_embedded, self.images_failed)
        return bytes(pdf.output())

    def export(self, products: Sequence[Product], output_path: str) -> str:
        """
        Write the price list to disk.

        Args:
            products: Products to export
            output_path: File path, or a directory to place file_name in

        Returns:
            Path of the written file
        """
        if os.path.isdir(output_path):
            output_path = os.path.join(output_path, self.file_name)
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)

        with open(output_path, 'wb') as f:
            f.write(self.render(products))
        return output_path
