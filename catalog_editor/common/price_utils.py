"""
Price Utilities

Rounding, parsing and es-PY (Guaraní) formatting helpers for prices.
"""

import math
import re
from typing import Any, Optional

from .constants import CURRENCY_PREFIX

# "120.000", "1.250.000" (es-PY thousands separator is a dot)
_GROUPED_DIGITS_RE = re.compile(r'^\d{1,3}(?:[.\s]\d{3})+$')


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves upward.

    Python's round() uses banker's rounding (round(0.5) == 0); prices are
    rounded the way a spreadsheet or a browser would.
    """
    return int(math.floor(value + 0.5))


def format_thousands(value: int) -> str:
    """Group digits with dots: 120000 -> '120.000'."""
    return f"{int(value):,}".replace(',', '.')


def format_pyg(value: int) -> str:
    """
    Format a price as Paraguayan Guaraníes without fractional digits.

    Examples:
        >>> format_pyg(120000)
        'Gs. 120.000'
    """
    return f"{CURRENCY_PREFIX} {format_thousands(round_half_up(value))}"


def parse_amount(text: Any) -> Optional[float]:
    """
    Parse a bulk-operation amount.

    Args:
        text: User input (string or number)

    Returns:
        Non-negative finite float, or None when the input is not usable
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, str):
        text = text.strip().replace(',', '.')
        if not text:
            return None
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_grouped_int(value: Any) -> Optional[int]:
    """
    Normalize a price to a plain integer.

    Accepts numbers and grouped-digit strings like "120.000" or "Gs. 120.000".

    Returns:
        Integer price, or None when the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round_half_up(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    text = re.sub(r'^(?:Gs\.?|₲|PYG)\s*', '', text, flags=re.IGNORECASE).strip()
    if _GROUPED_DIGITS_RE.match(text):
        return int(re.sub(r'[.\s]', '', text))
    try:
        number = float(text)
    except ValueError:
        return None
    return round_half_up(number) if math.isfinite(number) else None
