"""
Product data models.

Pure data classes for representing catalog products and the transient
records produced while a PDF is being processed.
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# (ymin, xmin, ymax, xmax), each normalized to 0-1
BoundingBox = Tuple[float, float, float, float]

UNNAMED_PRODUCT = "Producto sin nombre"


class BulkActionType(str, Enum):
    """Bulk price operations applied to every product."""
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    PERCENTAGE = "PERCENTAGE"


class ProcessingStep(str, Enum):
    IDLE = "idle"
    READING = "reading"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessingStatus:
    """Progress of an upload run. Recreated for every upload, never persisted."""
    step: ProcessingStep = ProcessingStep.IDLE
    message: str = ""
    progress: Optional[int] = None   # 1-based page currently processed
    total: Optional[int] = None      # Page count

    @property
    def is_busy(self) -> bool:
        return self.step in (ProcessingStep.READING, ProcessingStep.ANALYZING)

    @property
    def fraction(self) -> float:
        """Completed share of pages, for progress bars."""
        if not self.total or self.progress is None:
            return 0.0
        return min(1.0, max(0.0, self.progress / self.total))


@dataclass(frozen=True)
class ExtractionCandidate:
    """
    Validated record proposed by the extraction model.

    bounding_box is None when the model returned a box that was not
    exactly four numbers; the resulting product then has no thumbnail.
    """
    name: str
    original_price: int
    bounding_box: Optional[BoundingBox] = None


@dataclass
class Product:
    """
    Editable catalog entry.

    Prices are whole Guaraníes. The image is a JPEG-encoded square
    thumbnail, or None when the product has no photo.
    """
    id: str
    name: str
    original_price: int
    updated_price: int
    image: Optional[bytes] = None

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("Product id is required")
        if self.original_price < 0:
            raise ValueError("Original price must be non-negative")
        if self.updated_price < 0:
            raise ValueError("Updated price must be non-negative")

    @property
    def has_image(self) -> bool:
        return bool(self.image)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dictionary (image as base64 text)."""
        return {
            'id': self.id,
            'name': self.name,
            'originalPrice': self.original_price,
            'updatedPrice': self.updated_price,
            'image': base64.b64encode(self.image).decode('ascii') if self.image else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """
        Rebuild a product from to_dict() output.

        Also accepts images stored as data URIs
        ("data:image/jpeg;base64,...").

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected product object, got {type(data).__name__}")

        try:
            product_id = data['id']
            name = data['name']
            original_price = data['originalPrice']
            updated_price = data['updatedPrice']
        except KeyError as e:
            raise ValueError(f"Missing product field: {e}") from e

        if not isinstance(product_id, str) or not isinstance(name, str):
            raise ValueError("Product id and name must be strings")
        for price in (original_price, updated_price):
            if isinstance(price, bool) or not isinstance(price, int):
                raise ValueError(f"Price must be an integer, got {price!r}")

        image = None
        raw_image = data.get('image')
        if raw_image:
            if not isinstance(raw_image, str):
                raise ValueError("Image must be base64 text")
            if raw_image.startswith('data:'):
                raw_image = raw_image.split(',', 1)[-1]
            try:
                image = base64.b64decode(raw_image, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"Invalid image data: {e}") from e

        return cls(
            id=product_id,
            name=name,
            original_price=original_price,
            updated_price=updated_price,
            image=image or None,
        )
