"""
JPEG encoding helpers shared by the rasterizer, cropper and standardizer.
"""

import io

from PIL import Image

WHITE = (255, 255, 255)


def flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Composite any transparency onto an opaque white background."""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, WHITE)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """Encode a PIL image as JPEG bytes."""
    buf = io.BytesIO()
    flatten_to_rgb(image).save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def open_image(data: bytes) -> Image.Image:
    """
    Decode image bytes and force the pixel data to load.

    Raises:
        OSError: If the bytes are not a decodable image (PIL.UnidentifiedImageError
            is a subclass) or exceed Pillow's pixel limit
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Image.DecompressionBombError as e:
        raise OSError(f"Image too large: {e}") from e
    return image
