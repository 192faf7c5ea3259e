"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Persisted snapshot keys
STORAGE_KEY_PRODUCTS = "products"
STORAGE_KEY_FILE_NAME = "file_name"

# Fixed name of the downloaded price list
EXPORT_FILE_NAME = "Catalogo_Lattafa_PYG_Fotos.pdf"

# Guaraní display prefix used by the es-PY locale
CURRENCY_PREFIX = "Gs."

# User-facing status messages
MSG_READING = "Convirtiendo PDF a imágenes..."
MSG_ANALYZING = "Escaneando página {current}/{total}..."
MSG_COMPLETE = "Proceso finalizado."
MSG_ERROR = "Error al procesar. Verifica tu API Key o si el PDF es válido."
