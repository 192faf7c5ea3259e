"""
Application errors.

Only run-level failures are raised as exceptions. Page-level extraction
errors, malformed candidates, image codec errors and corrupt snapshots are
recovered where they happen and only logged.
"""


class CatalogEditorError(Exception):
    """Base class for errors that abort an operation."""


class ConfigurationError(CatalogEditorError):
    """Missing credential or unreadable settings."""


class DocumentError(CatalogEditorError):
    """The uploaded file could not be parsed or rendered as a PDF."""
