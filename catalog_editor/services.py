"""
Component wiring from settings, shared by the Streamlit app and the CLI.
"""

from typing import Any, Dict, Optional

from .catalog import CatalogStore, JsonFileStorage
from .common.config_loader import get_api_key
from .export import CatalogPdfExporter
from .extraction import GeminiExtractionClient
from .imaging import ImageStandardizer, PdfRasterizer, RegionCropper
from .pipeline import CatalogPipeline


def create_store(settings: Dict[str, Any], state_path: Optional[str] = None) -> CatalogStore:
    """Catalog store persisted to the configured snapshot file."""
    return CatalogStore(JsonFileStorage(state_path or settings['storage']['path']))


def create_extraction_client(
    settings: Dict[str, Any],
    api_key: Optional[str] = None,
) -> GeminiExtractionClient:
    extraction = settings['extraction']
    return GeminiExtractionClient(
        api_key=api_key if api_key is not None else get_api_key(),
        model=extraction['model'],
        endpoint=extraction['endpoint'],
        timeout=int(extraction['timeout']),
    )


def create_pipeline(
    settings: Dict[str, Any],
    store: CatalogStore,
    client: GeminiExtractionClient,
) -> CatalogPipeline:
    rasterizer = PdfRasterizer(
        scale=float(settings['rasterizer']['scale']),
        jpeg_quality=int(settings['rasterizer']['jpeg_quality']),
    )
    cropper = RegionCropper(jpeg_quality=int(settings['cropper']['jpeg_quality']))
    return CatalogPipeline(rasterizer, client, cropper, store)


def create_standardizer(settings: Dict[str, Any]) -> ImageStandardizer:
    thumbnail = settings['thumbnail']
    return ImageStandardizer(size=int(thumbnail['size']), jpeg_quality=int(thumbnail['jpeg_quality']))


def create_exporter(settings: Dict[str, Any]) -> CatalogPdfExporter:
    export = settings['export']
    return CatalogPdfExporter(title=export['title'], file_name=export['file_name'])


__all__ = [
    'create_store',
    'create_extraction_client',
    'create_pipeline',
    'create_standardizer',
    'create_exporter',
]
