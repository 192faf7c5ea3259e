"""
Catalog Price Editor

Modules:
    models      - Data models (Product, ExtractionCandidate, ProcessingStatus)
    common      - Shared utilities (config loader, logging, price formatting)
    imaging     - PDF rasterizer, region cropper, thumbnail standardizer
    extraction  - Gemini page extraction client and response parsing
    catalog     - Catalog store and snapshot persistence
    export      - PDF price list export
    pipeline    - Page-processing pipeline (rasterize -> extract -> crop -> merge)
"""
