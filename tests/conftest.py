"""Shared test fixtures."""

import io

import pytest
from fpdf import FPDF
from PIL import Image

from catalog_editor.catalog import CatalogStore, InMemoryStorage
from catalog_editor.models import Product


def make_jpeg(width=200, height=100, color=(200, 30, 30)):
    """Encode a solid-color JPEG."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="JPEG")
    return buf.getvalue()


def make_pdf(pages=1, text="Lattafa Asad 100ml - 120.000"):
    """Build a small text-only PDF with the given number of pages."""
    pdf = FPDF(orientation="P", unit="mm", format="A4")
    pdf.set_font("Helvetica", "", 12)
    for index in range(pages):
        pdf.add_page()
        pdf.cell(0, 10, f"{text} (page {index + 1})")
    return bytes(pdf.output())


@pytest.fixture
def sample_jpeg():
    """A 200x100 red JPEG."""
    return make_jpeg()


@pytest.fixture
def sample_pdf():
    """A two-page PDF."""
    return make_pdf(pages=2)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    """Empty catalog store backed by memory."""
    return CatalogStore(storage)


@pytest.fixture
def minimal_product():
    """Create a product without a photo."""
    return Product(
        id="prod-1",
        name="Lattafa Asad 100ml",
        original_price=120000,
        updated_price=120000,
    )


@pytest.fixture
def sample_products():
    """Three products, one of them with a thumbnail."""
    return [
        Product(id="prod-a", name="Asad", original_price=100, updated_price=100),
        Product(id="prod-b", name="Yara", original_price=250, updated_price=250, image=make_jpeg(30, 30)),
        Product(id="prod-c", name="Khamrah", original_price=0, updated_price=0),
    ]


@pytest.fixture
def jpeg_factory():
    """Build JPEGs of a given size and color."""
    return make_jpeg


@pytest.fixture
def pdf_factory():
    """Build PDFs with a given page count."""
    return make_pdf
