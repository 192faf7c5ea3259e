"""Tests for catalog_editor/services.py"""

import copy

from catalog_editor.catalog import JsonFileStorage
from catalog_editor.common.config_loader import DEFAULT_SETTINGS
from catalog_editor.services import (
    create_exporter,
    create_extraction_client,
    create_pipeline,
    create_standardizer,
    create_store,
)


def _settings(tmp_path):
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    settings["storage"]["path"] = str(tmp_path / "state.json")
    settings["rasterizer"]["scale"] = 2.0
    settings["thumbnail"]["size"] = 128
    settings["export"]["file_name"] = "precios.pdf"
    return settings


class TestFactories:
    def test_store_uses_configured_path(self, tmp_path):
        store = create_store(_settings(tmp_path))
        assert isinstance(store.storage, JsonFileStorage)
        assert store.storage.path == str(tmp_path / "state.json")

    def test_store_path_override(self, tmp_path):
        store = create_store(_settings(tmp_path), state_path=str(tmp_path / "other.json"))
        assert store.storage.path == str(tmp_path / "other.json")

    def test_client_explicit_key(self, tmp_path):
        client = create_extraction_client(_settings(tmp_path), api_key="k")
        assert client.is_configured
        assert client.url.endswith("/models/gemini-2.5-flash:generateContent")
        assert client.timeout == 120

    def test_client_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        client = create_extraction_client(_settings(tmp_path))
        assert client.api_key == "env-key"

    def test_pipeline_components(self, tmp_path):
        settings = _settings(tmp_path)
        store = create_store(settings)
        client = create_extraction_client(settings, api_key="k")
        pipeline = create_pipeline(settings, store, client)
        assert pipeline.rasterizer.scale == 2.0
        assert pipeline.extractor is client
        assert pipeline.store is store

    def test_standardizer_and_exporter(self, tmp_path):
        settings = _settings(tmp_path)
        assert create_standardizer(settings).size == 128
        assert create_exporter(settings).file_name == "precios.pdf"
