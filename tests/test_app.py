"""Tests for app.py helpers (Streamlit calls are mocked)."""

from unittest.mock import MagicMock, patch

import pytest

import app
from catalog_editor.models import BulkActionType, ProcessingStatus, ProcessingStep, Product


class SessionState(dict):
    """Dict with attribute access, like st.session_state."""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def st(store):
    mock_st = MagicMock()
    mock_st.session_state = SessionState(
        store=store,
        settings={"export": {"file_name": "out.pdf"}},
        status=ProcessingStatus(),
        export_cache=None,
    )
    with patch.object(app, "st", mock_st):
        yield mock_st


def _products():
    return [
        Product(id="a", name="Asad", original_price=100000, updated_price=100000),
        Product(id="b", name="Yara", original_price=50000, updated_price=50000),
    ]


class TestLiveProgress:
    def test_products_shown_while_analyzing(self, st, store):
        placeholder = MagicMock()
        on_status = app.status_handler(placeholder, store)

        on_status(ProcessingStatus(ProcessingStep.ANALYZING, "Escaneando página 1/2...", progress=1, total=2))
        st.table.assert_not_called()

        store.append(_products())
        on_status(ProcessingStatus(ProcessingStep.ANALYZING, "Escaneando página 2/2...", progress=2, total=2))

        rows = st.table.call_args.args[0]
        assert [r["Perfume"] for r in rows] == ["Asad", "Yara"]
        assert rows[0]["Precio Final"] == "Gs. 100.000"
        assert st.session_state.status.progress == 2

    def test_final_status_not_rendered(self, st, store):
        placeholder = MagicMock()
        store.append(_products())
        app.status_handler(placeholder, store)(ProcessingStatus(ProcessingStep.COMPLETE, "Proceso finalizado."))

        placeholder.container.assert_not_called()
        assert st.session_state.status.step == ProcessingStep.COMPLETE


class TestExportCache:
    def test_render_once_while_unchanged(self, st, store):
        store.append(_products())
        exporter = MagicMock()
        exporter.render.return_value = b"%PDF-1"

        with patch.object(app, "create_exporter", return_value=exporter):
            first = app.export_pdf(store)
            second = app.export_pdf(store)

        assert first == second == b"%PDF-1"
        exporter.render.assert_called_once()

    def test_rerender_after_edit(self, st, store):
        store.append(_products())
        exporter = MagicMock()
        exporter.render.side_effect = [b"%PDF-1", b"%PDF-2"]

        with patch.object(app, "create_exporter", return_value=exporter):
            app.export_pdf(store)
            store.set_price("a", 90000)
            assert app.export_pdf(store) == b"%PDF-2"

        assert exporter.render.call_count == 2


class TestPriceWidgets:
    def test_key_is_stable(self):
        assert app.price_key("a") == "price-a"

    def test_bulk_edit_updates_inputs(self, st, store):
        store.append(_products())
        store.bulk_adjust(BulkActionType.ADD, 10000)
        app.sync_price_widgets(store)

        assert st.session_state["price-a"] == 110000
        assert st.session_state["price-b"] == 60000

    def test_price_edit_keeps_one_key(self, st, store):
        store.append(_products())
        st.session_state["price-a"] = 95000

        app.on_price_change("a")
        st.session_state["price-a"] = 97000
        app.on_price_change("a")

        assert store.get("a").updated_price == 97000
        assert [k for k in st.session_state if k.startswith("price-")] == ["price-a"]

    def test_remove_drops_key(self, st, store):
        store.append(_products())
        app.sync_price_widgets(store)

        app.on_remove("a")

        assert "price-a" not in st.session_state
        assert [p.id for p in store] == ["b"]
