"""
Export modules.

Modules:
    pdf_exporter - CatalogPdfExporter renders the catalog as a PDF price list
"""

from .pdf_exporter import HEADERS, CatalogPdfExporter

__all__ = [
    'CatalogPdfExporter',
    'HEADERS',
]
