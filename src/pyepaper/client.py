"""High-level async client for the e-paper display server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyepaper._constants import BITMAPS_PATH, SCREENS_PATH, SETTINGS_PATH, VARIABLES_PATH
from pyepaper._grouping import group_by, last_value_group_reducer
from pyepaper._transport import HttpTransport, Transport
from pyepaper.bitmaps import BitmapCache
from pyepaper.config import EpaperConfig
from pyepaper.exceptions import EpaperError
from pyepaper.loaders import PaginatedLoader, SingleShotLoader
from pyepaper.state import errors as _errors
from pyepaper.state.bootstrap import load_initial_state
from pyepaper.state.storage import FileStorage, Storage
from pyepaper.state.store import State, StateStore

_logger = logging.getLogger(__name__)


def _page_variables(body: Any) -> dict[str, Any]:
    return dict(body.get("variables") or {})


def _group_bitmaps(body: Any) -> dict[str, Any]:
    return group_by(
        body.get("bitmaps") or [],
        lambda bitmap: bitmap["name"],
        group_reducer=last_value_group_reducer,
    )


class EpaperClient:
    """Async client exposing the cached display server resources.

    Usage::

        async with EpaperClient(config) as client:
            await client.load_initial_state()
            png = await client.load_bitmap("/bitmaps/logo.bin")

    The current snapshot is available as :attr:`state`; UI code can
    :meth:`subscribe` to be called with every new snapshot.
    """

    def __init__(
        self,
        config: EpaperConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        storage: Storage | None = None,
    ) -> None:
        self._config = config if config is not None else EpaperConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._storage: Storage = storage if storage is not None else FileStorage(self._config.storage_dir)
        self._store = StateStore(load_initial_state(self._storage, key=self._config.bitmap_cache_key))

        self._variables: PaginatedLoader | None = None
        self._screen_metadata: SingleShotLoader | None = None
        self._settings: SingleShotLoader | None = None
        self._bitmaps: SingleShotLoader | None = None
        self._bitmap_cache: BitmapCache | None = None
        if transport is not None:
            self._build_loaders(transport)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> EpaperClient:
        if not self._external_transport:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
            self._build_loaders(self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None
            self._variables = self._screen_metadata = self._settings = self._bitmaps = None
            self._bitmap_cache = None

    def _build_loaders(self, transport: Transport) -> None:
        self._variables = PaginatedLoader(transport, VARIABLES_PATH, "variables", _page_variables)
        self._screen_metadata = SingleShotLoader(transport, SCREENS_PATH, "screen_metadata")
        self._settings = SingleShotLoader(transport, SETTINGS_PATH, "settings")
        self._bitmaps = SingleShotLoader(transport, BITMAPS_PATH, "bitmaps", _group_bitmaps)
        self._bitmap_cache = BitmapCache(
            transport,
            self._storage,
            self._bitmaps,
            storage_key=self._config.bitmap_cache_key,
        )

    def _require(self, loader: Any) -> Any:
        if loader is None:
            raise EpaperError("Client not initialized. Use 'async with EpaperClient(...) as client:'")
        return loader

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def config(self) -> EpaperConfig:
        return self._config

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def state(self) -> State:
        """The current state snapshot."""
        return self._store.state

    def subscribe(self, listener: Callable[[State], None]) -> Callable[[], None]:
        """Call *listener* with every newly published snapshot."""
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    async def load_variables(self, *, force_reload: bool = False) -> dict[str, Any]:
        """Load every variable across all pages."""
        loader: PaginatedLoader = self._require(self._variables)
        return await loader.load(self._store, force_reload=force_reload)

    async def load_screen_metadata(self, *, force_reload: bool = False) -> dict[str, Any]:
        loader: SingleShotLoader = self._require(self._screen_metadata)
        return await loader.load(self._store, force_reload=force_reload)

    async def load_settings(self, *, force_reload: bool = False) -> dict[str, Any]:
        loader: SingleShotLoader = self._require(self._settings)
        return await loader.load(self._store, force_reload=force_reload)

    async def load_bitmaps(self, *, force_reload: bool = False) -> dict[str, Any]:
        """Load bitmap metadata keyed by bitmap name (last duplicate wins)."""
        loader: SingleShotLoader = self._require(self._bitmaps)
        return await loader.load(self._store, force_reload=force_reload)

    async def load_bitmap(self, filename: str) -> bytes:
        """Return raw bitmap bytes, served from the local cache when its hash is current."""
        cache: BitmapCache = self._require(self._bitmap_cache)
        return await cache.load_bitmap(self._store, filename)

    async def load_initial_state(self) -> list[Any]:
        """Load settings, variables and screen metadata concurrently.

        Fails fast on the first error.  Loaders that already succeeded, or
        that finish after the failure, keep their published results.
        """
        return list(
            await asyncio.gather(
                self.load_settings(),
                self.load_variables(),
                self.load_screen_metadata(),
            )
        )

    # ------------------------------------------------------------------
    # Error queue
    # ------------------------------------------------------------------

    def add_error(self, error: Any) -> None:
        """Queue a user-facing error for display."""
        self._store.update(lambda state: _errors.add_error(state, error))

    def dismiss_error(self, index: int) -> None:
        """Remove the queued error at *index*; out-of-range indexes are ignored."""
        self._store.update(lambda state: _errors.dismiss_error(state, index))
