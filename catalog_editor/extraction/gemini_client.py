"""
Gemini Extraction Client

Sends one page image to the Gemini generateContent REST endpoint and turns
the structured JSON answer into extraction candidates.
Any request or parsing failure degrades to an empty result for that page
so a multi-page run can continue.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import ConfigurationError
from ..models import ExtractionCandidate
from .response_parser import parse_candidates

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """Analyze this image of a Paraguayan perfume catalog.
Identify all products listed.
For each product, extract:
1. Name
2. Price in Guaraníes (convert "120.000" to integer 120000).
3. The bounding box of the PERFUME BOTTLE image associated with that price.
   If there are multiple products, be precise matching the photo to the text.

Format: Return a JSON array. Bounding box must be [ymin, xmin, ymax, xmax] normalized 0-1."""

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "originalPrice": {"type": "INTEGER"},
            "boundingBox": {
                "type": "ARRAY",
                "items": {"type": "NUMBER"},
                "description": "ymin, xmin, ymax, xmax",
            },
        },
        "required": ["name", "originalPrice", "boundingBox"],
    },
}


class GeminiExtractionClient:
    """
    Client for page-level product extraction with Gemini.

    Handles:
    - Authentication (API key header)
    - Request building (inline JPEG + instruction prompt + response schema)
    - Error handling (every failure except a missing key returns [])

    No request is retried.

    Usage:
        with GeminiExtractionClient(api_key="...") as client:
            candidates = client.extract_page(page_jpeg)
    """

    DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = 120,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key (None is accepted here, extraction then
                raises ConfigurationError)
            model: Model name (e.g., "gemini-2.5-flash")
            endpoint: API base URL
            timeout: Request timeout in seconds
        """
        self.api_key = (api_key or "").strip() or None
        self.model = model
        self.timeout = timeout
        self.url = f"{endpoint.rstrip('/')}/models/{model}:generateContent"

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if self.api_key:
            self.session.headers["x-goog-api-key"] = self.api_key

        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None

    def ensure_configured(self) -> None:
        """
        Raises:
            ConfigurationError: If no API key was provided
        """
        if not self.is_configured:
            raise ConfigurationError("API Key missing")

    def build_payload(self, image_jpeg: bytes) -> Dict[str, Any]:
        """Build the generateContent request body for one page image."""
        return {
            "contents": [{
                "parts": [
                    {
                        "inlineData": {
                            "mimeType": "image/jpeg",
                            "data": base64.b64encode(image_jpeg).decode("ascii"),
                        }
                    },
                    {"text": EXTRACTION_PROMPT},
                ]
            }],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    @staticmethod
    def response_text(result: Dict[str, Any]) -> Optional[str]:
        """
        Concatenate the text parts of the first candidate.

        Returns:
            Text, or None if the response has no usable candidate
        """
        candidates = result.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            feedback = result.get("promptFeedback")
            if isinstance(feedback, dict) and feedback.get("blockReason"):
                logger.warning("Gemini blocked the request: %s", feedback["blockReason"])
            return None

        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        if not isinstance(content, dict) or not isinstance(content.get("parts"), list):
            logger.error("Unexpected Gemini candidate shape: %r", first)
            return None

        texts = [part["text"] for part in content["parts"]
                 if isinstance(part, dict) and isinstance(part.get("text"), str)]
        return "".join(texts) or None

    def extract_page(self, image_jpeg: bytes) -> List[ExtractionCandidate]:
        """
        Extract product candidates from one page image.

        Args:
            image_jpeg: JPEG-encoded page raster

        Returns:
            Candidates in the order the model listed them; [] on any
            request or parsing failure

        Raises:
            ConfigurationError: If no API key is configured (checked
                before any network access)
        """
        self.ensure_configured()

        if not image_jpeg:
            logger.warning("Invalid image data provided to Gemini")
            return []

        self.requests_made += 1
        try:
            response = self.session.post(
                self.url,
                json=self.build_payload(image_jpeg),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.error("Gemini request timeout after %ds", self.timeout)
            return []
        except requests.exceptions.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            return []

        if response.status_code >= 400:
            logger.error("Gemini API Error %d: %s", response.status_code, response.text[:200])
            return []

        try:
            result = response.json()
        except ValueError as e:
            logger.error("Gemini returned non-JSON body: %s", e)
            return []

        if not isinstance(result, dict):
            logger.error("Unexpected Gemini response type: %s", type(result).__name__)
            return []

        text = self.response_text(result)
        if not text:
            return []

        try:
            candidates = parse_candidates(text)
        except ValueError as e:
            logger.error("Gemini Page Analysis Error: %s", e)
            return []

        logger.info("Gemini returned %d products", len(candidates))
        return candidates
