"""
Configuration Loader

Loads YAML settings (model, rendering, thumbnail, export and storage
options) and the extraction API credential from the environment.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SETTINGS_FILE = 'settings.yaml'

# Environment variables checked for the Gemini credential, in order
API_KEY_ENV_VARS = ('GEMINI_API_KEY', 'API_KEY')

DEFAULT_SETTINGS: Dict[str, Any] = {
    'extraction': {
        'model': 'gemini-2.5-flash',
        'endpoint': 'https://generativelanguage.googleapis.com/v1beta',
        'timeout': 120,
    },
    'rasterizer': {
        'scale': 1.5,
        'jpeg_quality': 80,
    },
    'cropper': {
        'jpeg_quality': 80,
    },
    'thumbnail': {
        'size': 300,
        'jpeg_quality': 85,
    },
    'export': {
        'file_name': 'Catalogo_Lattafa_PYG_Fotos.pdf',
        'title': 'Catálogo de Precios Actualizado',
    },
    'storage': {
        'path': 'data/catalog_state.json',
    },
}


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {config_path}")
    return data


def merge_settings(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge override into a copy of base.

    Args:
        base: Default values
        override: Values that take precedence

    Returns:
        New merged dictionary
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(filename: str = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load application settings merged over DEFAULT_SETTINGS.

    A missing settings file is not an error; the defaults are used.

    Returns:
        Settings dictionary with 'extraction', 'rasterizer', 'cropper',
        'thumbnail', 'export' and 'storage' sections
    """
    try:
        overrides = load_config(filename)
    except FileNotFoundError:
        logger.debug("No %s found, using default settings", filename)
        return copy.deepcopy(DEFAULT_SETTINGS)

    return merge_settings(DEFAULT_SETTINGS, overrides)


def get_api_key(env_file: Optional[str] = None) -> Optional[str]:
    """
    Read the extraction API key from the environment.

    Values from a .env file are loaded first without overriding variables
    that are already set.

    Args:
        env_file: Explicit .env path (default: search from the working directory)

    Returns:
        The key, or None when no variable is set
    """
    load_dotenv(env_file)

    for name in API_KEY_ENV_VARS:
        value = os.getenv(name, '').strip()
        if value:
            return value
    return None
