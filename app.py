"""
Streamlit user interface for the catalog price editor.

Run with:
    streamlit run app.py
"""

import logging
from datetime import date

import streamlit as st

from catalog_editor.common.config_loader import load_settings
from catalog_editor.common.log_config import setup_logging
from catalog_editor.common.price_utils import format_pyg, parse_amount
from catalog_editor.models import BulkActionType, ProcessingStatus, ProcessingStep
from catalog_editor.services import (
    create_exporter,
    create_extraction_client,
    create_pipeline,
    create_standardizer,
    create_store,
)

logger = logging.getLogger("catalog_editor.app")

MSG_MISSING_KEY = "Falta la API Key. Configura GEMINI_API_KEY en el entorno o en el archivo .env."
IMAGE_TYPES = ["png", "jpg", "jpeg", "webp", "gif", "bmp"]


def init_session_state() -> None:
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
    defaults = {
        "status": ProcessingStatus(),
        "processed_uploads": set(),
        "uploader_nonce": 0,
        "image_nonce": 0,
        "confirm_clear": False,
        "export_cache": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
    if "store" not in st.session_state:
        st.session_state.store = create_store(st.session_state.settings)


def price_key(product_id: str) -> str:
    """Session state key of a row's final-price input."""
    return f"price-{product_id}"


def sync_price_widgets(store) -> None:
    """Push store prices into the row inputs (after bulk edits)."""
    for product in store.products:
        st.session_state[price_key(product.id)] = int(product.updated_price)


def forget_price_widget(product_id: str) -> None:
    st.session_state.pop(price_key(product_id), None)


def preview_rows(products) -> list:
    """Name and prices of each product, for the live table shown while processing."""
    return [
        {
            "Perfume": p.name,
            "Precio Orig.": format_pyg(p.original_price),
            "Precio Final": format_pyg(p.updated_price),
        }
        for p in products
    ]


def catalog_signature(products) -> tuple:
    """Identifies the exported content; changes whenever a row or photo changes."""
    return (date.today(),) + tuple(
        (p.id, p.name, p.original_price, p.updated_price, hash(p.image)) for p in products
    )


def export_pdf(store) -> bytes:
    """Rendered price list, re-rendered only when the catalog changed."""
    signature = catalog_signature(store.products)
    cached = st.session_state.get("export_cache")
    if cached and cached[0] == signature:
        return cached[1]

    data = create_exporter(st.session_state.settings).render(store.products)
    st.session_state.export_cache = (signature, data)
    return data


def render_header() -> None:
    st.title("✨ Perfume Jessi Dubai")
    st.caption("CATÁLOG MANAGER")
    st.divider()


def render_status(placeholder, status: ProcessingStatus, store) -> None:
    """Show the loading panel plus the products extracted so far."""
    with placeholder.container(border=True):
        st.subheader(status.message)
        if status.total:
            st.progress(status.fraction)
        st.caption("Esto puede tomar unos segundos por página...")
        if len(store):
            st.caption(f"{len(store)} productos extraídos hasta ahora")
            st.table(preview_rows(store.products))


def status_handler(placeholder, store):
    """Pipeline callback: record the status and redraw the live panel."""
    def on_status(status: ProcessingStatus) -> None:
        st.session_state.status = status
        if status.is_busy:
            render_status(placeholder, status, store)
    return on_status


def handle_upload(uploaded_file) -> None:
    """Run the pipeline for a newly selected PDF (once per upload)."""
    if uploaded_file is None:
        return

    upload_id = getattr(uploaded_file, "file_id", None) or f"{uploaded_file.name}-{uploaded_file.size}"
    if upload_id in st.session_state.processed_uploads:
        return
    st.session_state.processed_uploads.add(upload_id)

    settings = st.session_state.settings
    client = create_extraction_client(settings)
    if not client.is_configured:
        st.session_state.status = ProcessingStatus(ProcessingStep.ERROR, MSG_MISSING_KEY)
        return

    store = st.session_state.store
    placeholder = st.empty()
    pipeline = create_pipeline(settings, store, client)
    with client:
        pipeline.process(uploaded_file.getvalue(), uploaded_file.name,
                         on_status=status_handler(placeholder, store))

    placeholder.empty()
    # New key resets the uploader so the same file can be selected again
    st.session_state.uploader_nonce += 1
    st.rerun()


def render_upload_panel() -> None:
    """Initial view: nothing loaded yet."""
    _, center, _ = st.columns([1, 2, 1])
    with center:
        with st.container(border=True):
            st.header("📄 Cargar Catálogo PDF")
            st.write("Sube tu lista de precios (Lattafa) para extraer productos y fotos.")
            uploaded = st.file_uploader(
                "Seleccionar PDF",
                type="pdf",
                key=f"upload-{st.session_state.uploader_nonce}",
            )
            status = st.session_state.status
            if status.step == ProcessingStep.ERROR:
                st.error(status.message)
    handle_upload(uploaded)


def render_toolbar(store) -> None:
    """Editor header: counts, add pages, clear and download."""
    info, add_more, actions = st.columns([2, 2, 2])
    with info:
        st.subheader("🖼️ Editor de Catálogo")
        st.caption(f"{len(store)} productos cargados. Tus cambios se guardan automáticamente.")
    with add_more:
        uploaded = st.file_uploader(
            "Agregar más páginas",
            type="pdf",
            key=f"upload-more-{st.session_state.uploader_nonce}",
        )
    with actions:
        if st.button("🗑️ Borrar Todo", width="stretch"):
            st.session_state.confirm_clear = True
        st.download_button(
            "⬇️ Descargar PDF",
            data=export_pdf(store),
            file_name=st.session_state.settings["export"]["file_name"],
            mime="application/pdf",
            type="primary",
            width="stretch",
        )

    if st.session_state.confirm_clear:
        st.warning("¿Estás seguro de querer borrar toda la lista guardada?")
        yes, no, _ = st.columns([1, 1, 4])
        if yes.button("Sí, borrar todo", type="primary"):
            for product in store.products:
                forget_price_widget(product.id)
            store.clear()
            st.session_state.confirm_clear = False
            st.session_state.status = ProcessingStatus()
            st.rerun()
        if no.button("Cancelar"):
            st.session_state.confirm_clear = False
            st.rerun()

    status = st.session_state.status
    if status.step == ProcessingStep.ERROR:
        st.error(status.message)

    handle_upload(uploaded)


def render_bulk_actions(store) -> None:
    """Bulk price operations with a single amount input."""
    with st.container(border=True):
        st.markdown("**🧮 Operaciones Masivas**")
        amount_col, add_col, sub_col, pct_col = st.columns([3, 1, 1, 1])
        raw = amount_col.text_input("Monto / Porcentaje", placeholder="0.00")
        amount = parse_amount(raw)
        disabled = amount is None

        action = None
        if add_col.button("➕ Sumar", disabled=disabled, width="stretch"):
            action = BulkActionType.ADD
        if sub_col.button("➖ Restar", disabled=disabled, width="stretch"):
            action = BulkActionType.SUBTRACT
        if pct_col.button("％ Aplicar %", disabled=disabled, width="stretch"):
            action = BulkActionType.PERCENTAGE

        if action is not None:
            store.bulk_adjust(action, amount)
            sync_price_widgets(store)
            st.rerun()


def on_price_change(product_id: str) -> None:
    value = st.session_state.get(price_key(product_id))
    if value is None or value < 0:
        return
    st.session_state.store.set_price(product_id, value)


def on_remove(product_id: str) -> None:
    st.session_state.store.remove(product_id)
    forget_price_widget(product_id)


def replace_image(store, product_id: str, uploaded_image) -> None:
    """Standardize a replacement photo and store it."""
    standardizer = create_standardizer(st.session_state.settings)
    thumbnail = standardizer.standardize(uploaded_image.getvalue())
    st.session_state.image_nonce += 1
    if thumbnail is None:
        logger.warning("Rejected replacement image %s for %s", uploaded_image.name, product_id)
        st.session_state.image_error = "No se pudo actualizar la imagen."
    else:
        store.set_image(product_id, thumbnail)
    st.rerun()


def render_product_table(store) -> None:
    """One row per product with photo, prices and actions."""
    widths = [1.3, 3, 1.5, 1.8, 0.7]
    header = st.columns(widths)
    for col, label in zip(header, ["Foto (click para cambiar)", "Perfume", "Precio Orig.", "Precio Final", "Acción"]):
        col.markdown(f"**{label}**")

    image_error = st.session_state.pop("image_error", None)
    if image_error:
        st.warning(image_error)

    for product in store.products:
        photo, name, original, final, action = st.columns(widths, vertical_alignment="center")
        with photo:
            if product.image:
                st.image(product.image, width=80)
            else:
                st.caption("Sin foto")
            uploaded_image = st.file_uploader(
                "Cambiar foto",
                type=IMAGE_TYPES,
                key=f"img-{product.id}-{st.session_state.image_nonce}",
                label_visibility="collapsed",
            )
        name.write(product.name)
        original.write(format_pyg(product.original_price))

        key = price_key(product.id)
        if key not in st.session_state:
            st.session_state[key] = int(product.updated_price)
        final.number_input(
            "Precio Final",
            min_value=0,
            step=1000,
            key=key,
            label_visibility="collapsed",
            on_change=on_price_change,
            args=(product.id,),
        )
        action.button("🗑️", key=f"del-{product.id}", help="Eliminar", on_click=on_remove, args=(product.id,))

        if uploaded_image is not None:
            replace_image(store, product.id, uploaded_image)

    st.caption(f"Mostrando {len(store)} productos")


def main() -> None:
    st.set_page_config(
        page_title="Perfume Jessi Dubai - Catalog Manager",
        page_icon="✨",
        layout="wide",
    )
    setup_logging()
    init_session_state()
    render_header()

    store = st.session_state.store
    if len(store) == 0:
        render_upload_panel()
        return

    render_toolbar(store)
    render_bulk_actions(store)
    render_product_table(store)


if __name__ == "__main__":
    main()
