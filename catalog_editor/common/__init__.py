# Common utilities
from .config_loader import get_api_key, load_config, load_settings
from .log_config import setup_logging
from .price_utils import (
    format_pyg,
    parse_amount,
    parse_grouped_int,
    round_half_up,
)
