"""Cold-start hydration of the state from durable storage."""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from pyepaper._constants import BITMAP_CACHE_KEY
from pyepaper.exceptions import EpaperStorageError
from pyepaper.models.bitmap import CachedBitmap
from pyepaper.state.storage import Storage
from pyepaper.state.store import INITIAL_STATE, State

_logger = logging.getLogger(__name__)

_CACHED_BITMAPS = TypeAdapter(dict[str, CachedBitmap])


def load_initial_state(storage: Storage, *, key: str = BITMAP_CACHE_KEY) -> State:
    """Build the starting snapshot, restoring the persisted bitmap cache.

    Every other field keeps its :data:`INITIAL_STATE` sentinel.  A missing
    entry yields :data:`INITIAL_STATE` itself; an unreadable or malformed
    one is logged and also yields :data:`INITIAL_STATE`.  This function
    never raises.
    """
    try:
        raw = storage.get_item(key)
        if raw is None:
            _logger.debug("No persisted bitmap cache under %r", key)
            return INITIAL_STATE
        parsed = json.loads(raw)
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise TypeError(f"expected a JSON object, got {type(parsed).__name__}")
        cached = _CACHED_BITMAPS.validate_python(parsed)
    except (OSError, EpaperStorageError, ValueError, TypeError, ValidationError) as exc:
        # json.JSONDecodeError is a ValueError.
        _logger.warning("Error loading cached state from storage key %r: %s", key, exc)
        return INITIAL_STATE

    _logger.debug("Restored %d cached bitmaps", len(cached))
    return INITIAL_STATE.model_copy(update={"cached_bitmaps": cached})
