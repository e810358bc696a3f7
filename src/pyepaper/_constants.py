"""Endpoint paths and storage keys shared across pyepaper modules."""

from __future__ import annotations

DEFAULT_BASE_URL = "http://epaper.local"
DEFAULT_API_PREFIX = "/api/v1"
DEFAULT_REQUEST_TIMEOUT = 10.0

#: Durable storage key holding the JSON-serialized bitmap cache.
BITMAP_CACHE_KEY = "bitmap_cache"

VARIABLES_PATH = "/variables"
SCREENS_PATH = "/screens"
SETTINGS_PATH = "/settings"
BITMAPS_PATH = "/bitmaps"

USER_AGENT = "pyepaper"
