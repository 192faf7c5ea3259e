"""Tests for catalog_editor/imaging/standardizer.py"""

import io

from PIL import Image

from catalog_editor.imaging import ImageStandardizer


def _encode(image, fmt):
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


class TestImageStandardizer:
    def test_output_is_square_jpeg(self, jpeg_factory):
        result = ImageStandardizer(size=300).standardize(jpeg_factory(640, 480))
        image = Image.open(io.BytesIO(result))
        assert image.format == "JPEG"
        assert image.size == (300, 300)
        assert image.mode == "RGB"

    def test_center_crop(self):
        # Left and right thirds are blue, middle third is red; the square crop keeps only red
        source = Image.new("RGB", (300, 100), (0, 0, 255))
        source.paste((255, 0, 0), (100, 0, 200, 100))
        result = ImageStandardizer(size=50).standardize(_encode(source, "PNG"))
        image = Image.open(io.BytesIO(result)).convert("RGB")
        r, g, b = image.getpixel((25, 25))
        assert r > 200 and b < 60
        r, g, b = image.getpixel((2, 25))
        assert r > 200 and b < 60

    def test_transparency_becomes_white(self):
        source = Image.new("RGBA", (40, 40), (0, 0, 0, 0))
        result = ImageStandardizer(size=20).standardize(_encode(source, "PNG"))
        image = Image.open(io.BytesIO(result)).convert("RGB")
        r, g, b = image.getpixel((10, 10))
        assert min(r, g, b) > 240

    def test_palette_image(self):
        source = Image.new("P", (64, 32))
        result = ImageStandardizer(size=16).standardize(_encode(source, "GIF"))
        assert Image.open(io.BytesIO(result)).size == (16, 16)

    def test_undecodable_returns_none(self):
        assert ImageStandardizer().standardize(b"definitely not an image") is None

    def test_empty_returns_none(self):
        assert ImageStandardizer().standardize(b"") is None

    def test_oversized_image_returns_none(self, monkeypatch):
        # 100x100 is more than twice the lowered limit, so Pillow refuses to decode it
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        source = _encode(Image.new("1", (100, 100)), "PNG")
        assert ImageStandardizer().standardize(source) is None
