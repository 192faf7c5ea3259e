"""
Data models for catalog editing.

This module contains pure data classes with no business logic.
"""

from .product import (
    BoundingBox,
    BulkActionType,
    ExtractionCandidate,
    ProcessingStatus,
    ProcessingStep,
    Product,
)

__all__ = [
    'BoundingBox',
    'BulkActionType',
    'ExtractionCandidate',
    'ProcessingStatus',
    'ProcessingStep',
    'Product',
]
