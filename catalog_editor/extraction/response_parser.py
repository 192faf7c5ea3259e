"""
Extraction Response Parser

Validates the JSON returned by the extraction model before any product is
built from it. The model output is untrusted: the payload may be wrapped in
code fences, fields may be missing, prices may arrive as grouped-digit
strings, and bounding boxes may have the wrong length.
"""

import json
import logging
import math
import re
from numbers import Real
from typing import Any, List, Optional

from ..common.price_utils import parse_grouped_int
from ..models import BoundingBox, ExtractionCandidate
from ..models.product import UNNAMED_PRODUCT

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r'```(?:json)?', re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove ``` / ```json markers around a JSON payload."""
    return _CODE_FENCE_RE.sub('', text).strip()


def parse_bounding_box(value: Any) -> Optional[BoundingBox]:
    """
    Validate a [ymin, xmin, ymax, xmax] box.

    Returns:
        Tuple of four floats, or None unless value is a list of exactly
        four finite numbers
    """
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        return None
    if not all(isinstance(v, Real) and not isinstance(v, bool) and math.isfinite(v) for v in value):
        return None
    return tuple(float(v) for v in value)


def parse_candidate(item: Any) -> Optional[ExtractionCandidate]:
    """
    Convert one element of the model's array into a candidate.

    Returns:
        ExtractionCandidate, or None if the element is not an object
    """
    if not isinstance(item, dict):
        return None

    name = item.get('name')
    name = str(name).strip() if name is not None else ''

    price = parse_grouped_int(item.get('originalPrice'))
    if price is None or price < 0:
        price = 0

    return ExtractionCandidate(
        name=name or UNNAMED_PRODUCT,
        original_price=price,
        bounding_box=parse_bounding_box(item.get('boundingBox')),
    )


def parse_candidates(text: Optional[str]) -> List[ExtractionCandidate]:
    """
    Parse the model's text response into candidates.

    Args:
        text: Raw response text, possibly wrapped in code fences

    Returns:
        Candidates in response order

    Raises:
        ValueError: If the payload is not a JSON array (json.JSONDecodeError
            is a ValueError)
    """
    if not text:
        return []

    data = json.loads(strip_code_fences(text))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")

    candidates = []
    for index, item in enumerate(data):
        candidate = parse_candidate(item)
        if candidate is None:
            logger.debug("Dropping non-object element %d: %r", index, item)
            continue
        candidates.append(candidate)
    return candidates
