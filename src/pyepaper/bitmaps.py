"""Content-addressable bitmap cache.

Cached payloads are validated against the hash the server reports in each
bitmap's metadata rather than by age, so an unchanged asset is never
downloaded twice and clock skew cannot make the cache serve stale bytes.
Each check still costs the (memoized) metadata load.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Mapping
from typing import Any

from pyepaper._constants import BITMAP_CACHE_KEY, BITMAPS_PATH
from pyepaper._hashing import normalize_hash, simple_hash
from pyepaper._transport import Transport
from pyepaper.exceptions import EpaperStorageError
from pyepaper.loaders import SingleShotLoader
from pyepaper.models.bitmap import CachedBitmap
from pyepaper.state.storage import Storage
from pyepaper.state.store import State, StateStore

_logger = logging.getLogger(__name__)


def short_name(filename: str) -> str:
    """Last path segment of *filename*, as used in the download URL."""
    return filename.split("/")[-1]


def reported_hash(record: Any) -> str | None:
    """Extract ``metadata.hash`` from a server bitmap record."""
    if not isinstance(record, Mapping):
        return None
    metadata = record.get("metadata")
    if not isinstance(metadata, Mapping):
        return None
    return normalize_hash(metadata.get("hash"))


def is_fresh(cached: CachedBitmap | None, record: Any) -> bool:
    """Whether *cached* holds bytes matching the server's current hash."""
    if cached is None or not cached.data or cached.hash is None:
        return False
    return reported_hash(record) == cached.hash


def upsert_cached_bitmap(
    cached_bitmaps: Mapping[str, CachedBitmap],
    filename: str,
    data: str,
    digest: str,
) -> dict[str, CachedBitmap]:
    """Return a new mapping with *filename* set to *data*/*digest*.

    Fields other than ``data`` and ``hash`` on an existing entry are kept.
    """
    existing = cached_bitmaps.get(filename)
    if existing is None:
        entry = CachedBitmap(data=data, hash=digest)
    else:
        entry = existing.model_copy(update={"data": data, "hash": digest})
    return {**cached_bitmaps, filename: entry}


def _dump_entry(entry: CachedBitmap) -> dict[str, Any]:
    record = entry.model_dump(mode="json")
    if record.get("hash") is None:
        record.pop("hash", None)
    return record


def dump_cached_bitmaps(cached_bitmaps: Mapping[str, CachedBitmap]) -> str:
    """Serialize the cache to the durable storage JSON layout."""
    return json.dumps(
        {path: _dump_entry(entry) for path, entry in cached_bitmaps.items()},
        separators=(",", ":"),
    )


class BitmapCache:
    """Serves bitmap bytes from the local cache or the server."""

    def __init__(
        self,
        transport: Transport,
        storage: Storage,
        bitmaps_loader: SingleShotLoader,
        *,
        storage_key: str = BITMAP_CACHE_KEY,
    ) -> None:
        self._transport = transport
        self._storage = storage
        self._bitmaps_loader = bitmaps_loader
        self._storage_key = storage_key

    async def load_bitmap(self, store: StateStore, filename: str) -> bytes:
        """Return the raw bytes of the bitmap at *filename*.

        The full *filename* is the cache key; only its last segment is
        used to build the download URL.  On a miss the fresh payload is
        published into the state and then written to durable storage.

        Raises
        ------
        EpaperTransportError
            Metadata or payload download failed.
        EpaperStorageError
            The payload was published but could not be persisted.
        """
        cached = store.state.cached_bitmaps.get(filename)
        bitmaps = await self._bitmaps_loader.load(store)

        if is_fresh(cached, bitmaps.get(filename)):
            _logger.debug("Bitmap cache hit for %s", filename)
            assert cached is not None  # noqa: S101
            return base64.b64decode(cached.data)

        _logger.debug("Bitmap cache miss for %s", filename)
        raw = await self._transport.get(f"{BITMAPS_PATH}/{short_name(filename)}", binary=True)
        data = bytes(raw)
        digest = simple_hash(data)
        encoded = base64.b64encode(data).decode("ascii")

        new_state = store.update(
            lambda state: state.model_copy(
                update={"cached_bitmaps": upsert_cached_bitmap(state.cached_bitmaps, filename, encoded, digest)}
            )
        )
        self._persist(new_state)
        return data

    def _persist(self, state: State) -> None:
        payload = dump_cached_bitmaps(state.cached_bitmaps)
        try:
            self._storage.set_item(self._storage_key, payload)
        except EpaperStorageError:
            raise
        except OSError as exc:
            raise EpaperStorageError(f"Failed to persist bitmap cache: {exc}") from exc
