"""Tests for catalog_editor/extraction/gemini_client.py"""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from catalog_editor.exceptions import ConfigurationError
from catalog_editor.extraction import EXTRACTION_PROMPT, RESPONSE_SCHEMA, GeminiExtractionClient

PAGE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def client():
    return GeminiExtractionClient(api_key="test-key", model="gemini-test")


def gemini_response(payload, status_code=200):
    """Mock a generateContent response whose text part is payload."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": payload}]}}],
    }
    return response


class TestInit:
    def test_url(self, client):
        assert client.url == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-test:generateContent"
        )

    def test_custom_endpoint_trailing_slash(self):
        c = GeminiExtractionClient(api_key="k", model="m", endpoint="http://localhost:8080/v1/")
        assert c.url == "http://localhost:8080/v1/models/m:generateContent"

    def test_session_headers(self, client):
        assert client.session.headers["x-goog-api-key"] == "test-key"
        assert client.session.headers["Content-Type"] == "application/json"

    def test_blank_key_not_configured(self):
        c = GeminiExtractionClient(api_key="  ")
        assert c.is_configured is False
        assert "x-goog-api-key" not in c.session.headers


class TestBuildPayload:
    def test_inline_image_and_prompt(self, client):
        payload = client.build_payload(PAGE_JPEG)
        parts = payload["contents"][0]["parts"]
        assert parts[0]["inlineData"]["mimeType"] == "image/jpeg"
        assert base64.b64decode(parts[0]["inlineData"]["data"]) == PAGE_JPEG
        assert parts[1]["text"] == EXTRACTION_PROMPT

    def test_structured_output(self, client):
        config = client.build_payload(PAGE_JPEG)["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"] == RESPONSE_SCHEMA
        assert RESPONSE_SCHEMA["items"]["required"] == ["name", "originalPrice", "boundingBox"]


class TestExtractPage:
    def test_successful_extraction(self, client):
        payload = json.dumps([
            {"name": "Asad", "originalPrice": 120000, "boundingBox": [0.1, 0.1, 0.3, 0.3]},
            {"name": "Yara", "originalPrice": 95000, "boundingBox": [0.5, 0.1, 0.7, 0.3]},
        ])

        with patch.object(client.session, "post", return_value=gemini_response(payload)) as post:
            result = client.extract_page(PAGE_JPEG)

        assert [c.name for c in result] == ["Asad", "Yara"]
        assert result[0].original_price == 120000
        assert post.call_args.args[0] == client.url
        assert post.call_args.kwargs["timeout"] == client.timeout
        assert client.requests_made == 1

    def test_joins_text_parts(self, client):
        response = MagicMock()
        response.status_code = 200
        response.json.return_value = {
            "candidates": [{"content": {"parts": [{"text": '[{"name": "A", '}, {"text": '"originalPrice": 5}]'}]}}],
        }

        with patch.object(client.session, "post", return_value=response):
            result = client.extract_page(PAGE_JPEG)

        assert len(result) == 1
        assert result[0].bounding_box is None

    def test_missing_key_raises_before_request(self):
        c = GeminiExtractionClient(api_key=None)
        with patch.object(c.session, "post") as post:
            with pytest.raises(ConfigurationError, match="API Key missing"):
                c.extract_page(PAGE_JPEG)
        post.assert_not_called()

    def test_empty_image_returns_empty(self, client):
        with patch.object(client.session, "post") as post:
            assert client.extract_page(b"") == []
        post.assert_not_called()

    def test_returns_empty_on_http_error(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 500
        mock_response.text = "Internal error"

        with patch.object(client.session, "post", return_value=mock_response):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_on_timeout(self, client):
        with patch.object(client.session, "post", side_effect=requests.exceptions.Timeout):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_on_connection_error(self, client):
        with patch.object(client.session, "post", side_effect=requests.exceptions.ConnectionError("down")):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_on_non_json_body(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("not json")

        with patch.object(client.session, "post", return_value=mock_response):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_on_malformed_text(self, client):
        with patch.object(client.session, "post", return_value=gemini_response("not json at all")):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_on_non_array(self, client):
        with patch.object(client.session, "post", return_value=gemini_response('{"name": "A"}')):
            assert client.extract_page(PAGE_JPEG) == []

    def test_returns_empty_when_blocked(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"promptFeedback": {"blockReason": "SAFETY"}}

        with patch.object(client.session, "post", return_value=mock_response):
            assert client.extract_page(PAGE_JPEG) == []


    @pytest.mark.parametrize("body", [
        {"candidates": ["oops"]},
        {"candidates": [{"content": "text"}]},
        {"candidates": [{"content": {"parts": "text"}}]},
        {"candidates": {"content": {}}},
        {"promptFeedback": "blocked"},
    ])
    def test_returns_empty_on_unexpected_shape(self, client, body):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = body

        with patch.object(client.session, "post", return_value=mock_response):
            assert client.extract_page(PAGE_JPEG) == []


class TestContextManager:
    def test_closes_session(self):
        c = GeminiExtractionClient(api_key="k")
        with patch.object(c.session, "close") as close:
            with c:
                pass
        close.assert_called_once()
