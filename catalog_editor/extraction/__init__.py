"""
Product extraction modules.

Modules:
    gemini_client - GeminiExtractionClient for page-level extraction
    response_parser - Validation of the model's JSON output
"""

from .gemini_client import EXTRACTION_PROMPT, RESPONSE_SCHEMA, GeminiExtractionClient
from .response_parser import (
    parse_bounding_box,
    parse_candidate,
    parse_candidates,
    strip_code_fences,
)

__all__ = [
    'GeminiExtractionClient',
    'EXTRACTION_PROMPT',
    'RESPONSE_SCHEMA',
    'parse_bounding_box',
    'parse_candidate',
    'parse_candidates',
    'strip_code_fences',
]
