"""
Catalog state modules.

Modules:
    store - CatalogStore with bulk and per-product edits
    storage - SnapshotStorage port plus JSON file and in-memory adapters
"""

from .storage import InMemoryStorage, JsonFileStorage, SnapshotStorage
from .store import CatalogStore, apply_bulk_action

__all__ = [
    'CatalogStore',
    'apply_bulk_action',
    'SnapshotStorage',
    'JsonFileStorage',
    'InMemoryStorage',
]
