"""Copy-on-write state snapshots and the store that publishes them.

A :class:`State` is never mutated once published.  Every change builds a
new snapshot with :meth:`pydantic.BaseModel.model_copy`, which copies the
model shallowly: fields that are not updated keep the *same* objects.
That is what makes sentinel detection work: a resource is unloaded iff
its field is still the very object held by :data:`INITIAL_STATE`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyepaper.models.bitmap import CachedBitmap

_logger = logging.getLogger(__name__)

Listener = Callable[["State"], None]


class State(BaseModel):
    """Immutable snapshot of all client-side data."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    variables: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    screen_metadata: dict[str, Any] = Field(default_factory=dict)
    bitmaps: dict[str, Any] = Field(default_factory=dict)
    cached_bitmaps: dict[str, CachedBitmap] = Field(default_factory=dict)
    errors: tuple[Any, ...] = ()
    loaded_pages: dict[str, bool] = Field(default_factory=dict)

    def is_loaded(self, field: str) -> bool:
        """Whether *field* has been replaced since :data:`INITIAL_STATE`."""
        return getattr(self, field) is not getattr(INITIAL_STATE, field)

    def with_resource(self, field: str, value: Any) -> State:
        """Return a snapshot with *field* set and marked as loaded."""
        return self.model_copy(
            update={
                field: value,
                "loaded_pages": {**self.loaded_pages, field: True},
            }
        )


#: Sentinel snapshot; its field objects mark "never loaded".
INITIAL_STATE = State()

RESOURCE_FIELDS: frozenset[str] = frozenset(State.model_fields) - {"errors", "loaded_pages"}


class StateStore:
    """Holds the current :class:`State` and notifies subscribers on change.

    All mutation happens on the event loop thread, so the store needs no
    locking; the last published snapshot wins.
    """

    def __init__(self, initial: State | None = None) -> None:
        self._state = INITIAL_STATE if initial is None else initial
        self._listeners: list[Listener] = []

    @property
    def state(self) -> State:
        """The current snapshot."""
        return self._state

    def set_state(self, state: State) -> None:
        """Publish *state* as the current snapshot.

        Publishing the snapshot that is already current is a no-op.
        """
        if state is self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.debug("State listener %r failed", listener, exc_info=True)

    def update(self, fn: Callable[[State], State]) -> State:
        """Apply *fn* to the current snapshot and publish the result."""
        new_state = fn(self._state)
        self.set_state(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
