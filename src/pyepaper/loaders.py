"""Memoizing loaders that fill state fields from the REST API.

A loader owns one :class:`~pyepaper.state.store.State` field.  The first
successful load replaces the field's sentinel; later calls return the
stored value without touching the network unless ``force_reload`` is set.

Overlapping calls are not coalesced: two loads started before either
finishes both go to the network and both publish, and the later publish
wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from pyepaper._transport import Transport
from pyepaper.exceptions import EpaperProtocolError
from pyepaper.models.page import PageEnvelope
from pyepaper.state.store import RESOURCE_FIELDS, StateStore

_logger = logging.getLogger(__name__)

Transform = Callable[[Any], Any]


def _identity(body: Any) -> Any:
    return body


class _Loader:
    def __init__(
        self,
        transport: Transport,
        api_path: str,
        state_variable: str,
        transform: Transform = _identity,
    ) -> None:
        if state_variable not in RESOURCE_FIELDS:
            raise ValueError(f"Unknown state field: {state_variable!r}")
        self._transport = transport
        self.api_path = api_path
        self.state_variable = state_variable
        self._transform = transform

    def _cached(self, store: StateStore) -> tuple[bool, Any]:
        state = store.state
        if state.is_loaded(self.state_variable):
            return True, getattr(state, self.state_variable)
        return False, None

    def _publish(self, store: StateStore, value: Any) -> None:
        store.update(lambda state: state.with_resource(self.state_variable, value))
        _logger.debug("Published %s", self.state_variable)


class SingleShotLoader(_Loader):
    """Loads a resource with a single GET."""

    async def load(self, store: StateStore, *, force_reload: bool = False) -> Any:
        """Return the resource, fetching it only if it is not loaded yet.

        Transport and transform errors propagate and leave the state
        untouched, so the next call retries.
        """
        if not force_reload:
            hit, value = self._cached(store)
            if hit:
                _logger.debug("%s already loaded", self.state_variable)
                return value

        body = await self._transport.get(self.api_path)
        value = self._transform(body)
        self._publish(store, value)
        return value


class PaginatedLoader(_Loader):
    """Loads a keyed collection spread over ``?page=N`` requests.

    Each page reports the total ``count`` of records.  The transform turns
    a page body into a partial mapping; pages are merged in order (later
    pages win on duplicate keys) until the accumulated key count reaches
    ``count``.  The state is published once, after the last page.
    """

    async def load(
        self,
        store: StateStore,
        *,
        force_reload: bool = False,
        page: int = 0,
        others: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the full collection, fetching every page on a miss.

        Parameters
        ----------
        store : StateStore
            Store to read from and publish to.
        force_reload : bool
            Fetch even if the collection is already loaded.
        page : int
            First page to request.
        others : dict or None
            Records already accumulated from earlier pages.

        Raises
        ------
        EpaperProtocolError
            If a page omits ``count`` or adds no new keys while the total
            is still out of reach.
        """
        if not force_reload:
            hit, value = self._cached(store)
            if hit:
                _logger.debug("%s already loaded", self.state_variable)
                return value

        accumulated: dict[str, Any] = dict(others or {})
        while True:
            path = f"{self.api_path}?page={page}"
            body = await self._transport.get(path)
            count = self._page_count(path, body)
            merged = {**accumulated, **self._transform(body)}

            if len(merged) >= count:
                _logger.debug("%s complete after page %d (%d records)", self.state_variable, page, len(merged))
                self._publish(store, merged)
                return merged

            if len(merged) == len(accumulated):
                raise EpaperProtocolError(
                    f"{path} added no new records ({len(merged)} of {count}); refusing to request more pages",
                    endpoint=path,
                )

            accumulated = merged
            page += 1

    @staticmethod
    def _page_count(path: str, body: Any) -> int:
        try:
            return PageEnvelope.model_validate(body).count
        except ValidationError as exc:
            raise EpaperProtocolError(f"{path} returned no usable count: {exc}", endpoint=path) from exc
