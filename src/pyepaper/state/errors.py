"""User-facing error queue.

The queue is a plain data sink: errors are appended for the UI to show and
removed when the user dismisses them.  Nothing here interprets, limits or
retries them.
"""

from __future__ import annotations

import logging
from typing import Any

from pyepaper.state.store import State

_logger = logging.getLogger(__name__)


def add_error(state: State, error: Any) -> State:
    """Return a snapshot with *error* appended to the queue."""
    return state.model_copy(update={"errors": (*state.errors, error)})


def dismiss_error(state: State, index: int) -> State:
    """Return a snapshot without the error at *index*.

    An index outside ``0 <= index < len(errors)`` leaves the queue alone
    and returns *state* itself, so callers can detect the no-op by
    identity.
    """
    if not 0 <= index < len(state.errors):
        _logger.debug("Ignoring dismiss of error index %d (queue size %d)", index, len(state.errors))
        return state
    return state.model_copy(update={"errors": state.errors[:index] + state.errors[index + 1 :]})
