"""
Utility modules for the site mirror.

Contains logging, path handling utilities, and constants.
"""

from .log import setup_logger, get_logger
from .paths import normalize_url, page_output_path, asset_filename, ensure_dir
from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_SCOPE_PREFIX,
    DEFAULT_SEED_PATH,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SETTLE_DELAY,
    DEFAULT_RENDER_TIMEOUT,
    DEFAULT_USER_AGENT,
    DEFAULT_ASSET_TIMEOUT,
    DEFAULT_CONCURRENCY,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "normalize_url",
    "page_output_path",
    "asset_filename",
    "ensure_dir",
    "DEFAULT_BASE_URL",
    "DEFAULT_SCOPE_PREFIX",
    "DEFAULT_SEED_PATH",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_SETTLE_DELAY",
    "DEFAULT_RENDER_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "DEFAULT_ASSET_TIMEOUT",
    "DEFAULT_CONCURRENCY",
]
