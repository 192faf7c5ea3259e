"""
Catalog Store

Owns the ordered product list of the current session and writes a snapshot
through a SnapshotStorage after every change.
"""

import json
import logging
from typing import Iterable, List, Optional, Tuple

from ..common.constants import STORAGE_KEY_FILE_NAME, STORAGE_KEY_PRODUCTS
from ..common.price_utils import round_half_up
from ..models import BulkActionType, Product
from .storage import SnapshotStorage

logger = logging.getLogger(__name__)


def apply_bulk_action(price: int, action: BulkActionType, amount: float) -> int:
    """
    Compute one product's new price for a bulk operation.

    Args:
        price: Current updated price
        action: ADD, SUBTRACT (floored at zero) or PERCENTAGE
        amount: Non-negative amount (Guaraníes, or percent for PERCENTAGE)

    Returns:
        New price rounded to the nearest integer
    """
    if action == BulkActionType.ADD:
        new_price = price + amount
    elif action == BulkActionType.SUBTRACT:
        new_price = max(0, price - amount)
    elif action == BulkActionType.PERCENTAGE:
        new_price = price * (1 + amount / 100)
    else:
        raise ValueError(f"Unsupported bulk action: {action}")
    return round_half_up(new_price)


class CatalogStore:
    """
    In-memory catalog with snapshot persistence.

    Insertion order is significant (page/appearance order) and ids are
    unique. The previous session is restored on construction.

    Usage:
        store = CatalogStore(JsonFileStorage("data/catalog_state.json"))
        store.append(products)
        store.bulk_adjust(BulkActionType.PERCENTAGE, 10)
    """

    def __init__(self, storage: SnapshotStorage):
        self.storage = storage
        self._products: List[Product] = []
        self._file_name = ""
        self.load()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products)

    @property
    def file_name(self) -> str:
        return self._file_name

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self):
        return iter(tuple(self._products))

    def get(self, product_id: str) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def _require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise KeyError(f"Unknown product id: {product_id}")
        return product

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """
        Restore the persisted snapshot.

        A corrupt snapshot is discarded and the store starts empty.

        Returns:
            True if a previous session was restored
        """
        self._products = []
        self._file_name = ""

        raw = self.storage.read(STORAGE_KEY_PRODUCTS)
        if not raw:
            return False

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"Expected a list, got {type(data).__name__}")
            products = [Product.from_dict(item) for item in data]
            ids = [p.id for p in products]
            if len(ids) != len(set(ids)):
                raise ValueError("Duplicate product ids in snapshot")
        except ValueError as e:
            logger.warning("Error loading saved data, starting empty: %s", e)
            return False

        self._products = products
        self._file_name = self.storage.read(STORAGE_KEY_FILE_NAME) or ""
        logger.info("Restored %d products from previous session", len(products))
        return True

    def save(self) -> None:
        """Write the full catalog and source file name to storage."""
        payload = json.dumps([p.to_dict() for p in self._products], ensure_ascii=False)
        self.storage.write(STORAGE_KEY_PRODUCTS, payload)
        self.storage.write(STORAGE_KEY_FILE_NAME, self._file_name)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_file_name(self, file_name: str) -> None:
        """Remember the most recently uploaded source file."""
        self._file_name = file_name or ""
        if self._products:
            self.save()

    def append(self, records: Iterable[Product]) -> int:
        """
        Add products at the end, keeping their relative order.

        Returns:
            Number of products added

        Raises:
            ValueError: If an id already exists in the catalog or repeats
                within records
        """
        records = list(records)
        if not records:
            return 0

        existing = {p.id for p in self._products}
        for product in records:
            if product.id in existing:
                raise ValueError(f"Duplicate product id: {product.id}")
            existing.add(product.id)

        self._products.extend(records)
        self.save()
        return len(records)

    def bulk_adjust(self, action: BulkActionType, amount: float) -> None:
        """
        Apply a bulk price operation to every product's updated price.

        The amount is validated by the caller (non-negative, finite).
        Original prices are never changed.
        """
        if not self._products:
            return
        for product in self._products:
            product.updated_price = apply_bulk_action(product.updated_price, action, amount)
        logger.info("Applied %s %s to %d products", action.value, amount, len(self._products))
        self.save()

    def set_price(self, product_id: str, value: float) -> None:
        """
        Overwrite one product's updated price.

        Raises:
            KeyError: If the product does not exist
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Price must be non-negative")
        product = self._require(product_id)
        product.updated_price = round_half_up(value)
        self.save()

    def set_image(self, product_id: str, image: Optional[bytes]) -> None:
        """
        Overwrite one product's thumbnail (empty bytes clear it).

        Raises:
            KeyError: If the product does not exist
        """
        product = self._require(product_id)
        product.image = image or None
        self.save()

    def remove(self, product_id: str) -> None:
        """
        Delete one product.

        Raises:
            KeyError: If the product does not exist
        """
        product = self._require(product_id)
        self._products.remove(product)
        self.save()

    def clear(self) -> None:
        """Empty the catalog, forget the file name and drop the snapshot."""
        self._products = []
        self._file_name = ""
        self.storage.remove(STORAGE_KEY_PRODUCTS)
        self.storage.remove(STORAGE_KEY_FILE_NAME)
        logger.info("Catalog cleared")
