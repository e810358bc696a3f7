"""pyepaper - Async client-side state cache for an e-paper display server."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyepaper")
except PackageNotFoundError:
    __version__ = "0+local"
from pyepaper._grouping import group_by, last_value_group_reducer, list_group_reducer
from pyepaper._hashing import simple_hash
from pyepaper.bitmaps import BitmapCache
from pyepaper.client import EpaperClient
from pyepaper.config import EpaperConfig
from pyepaper.exceptions import (
    EpaperConfigError,
    EpaperError,
    EpaperProtocolError,
    EpaperStorageError,
    EpaperTransportError,
)
from pyepaper.loaders import PaginatedLoader, SingleShotLoader
from pyepaper.models import CachedBitmap
from pyepaper.state.bootstrap import load_initial_state
from pyepaper.state.errors import add_error, dismiss_error
from pyepaper.state.storage import FileStorage, MemoryStorage, Storage
from pyepaper.state.store import INITIAL_STATE, State, StateStore

__all__ = [
    "__version__",
    "BitmapCache",
    "CachedBitmap",
    "EpaperClient",
    "EpaperConfig",
    "EpaperConfigError",
    "EpaperError",
    "EpaperProtocolError",
    "EpaperStorageError",
    "EpaperTransportError",
    "FileStorage",
    "INITIAL_STATE",
    "MemoryStorage",
    "PaginatedLoader",
    "SingleShotLoader",
    "State",
    "StateStore",
    "Storage",
    "add_error",
    "dismiss_error",
    "group_by",
    "last_value_group_reducer",
    "list_group_reducer",
    "load_initial_state",
    "simple_hash",
]
