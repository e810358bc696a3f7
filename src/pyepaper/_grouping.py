"""Group-by helper for collapsing record lists into mappings."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Any, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")

GroupReducer = Callable[[Any, T], Any]


def list_group_reducer(existing: list[T] | None, item: T) -> list[T]:
    """Collect every item sharing a key, in input order."""
    if existing is None:
        return [item]
    return [*existing, item]


def last_value_group_reducer(existing: T | None, item: T) -> T:
    """Keep the last-seen item for each key."""
    return item


def group_by(
    items: Iterable[T],
    key_fn: Callable[[T], K],
    *,
    group_reducer: GroupReducer[T] = list_group_reducer,
) -> dict[K, Any]:
    """Collapse *items* into a mapping keyed by ``key_fn(item)``.

    ``group_reducer(existing, item)`` decides the value stored for a key;
    ``existing`` is ``None`` the first time a key is seen.  Keys keep the
    order of their first appearance.
    """
    grouped: dict[K, Any] = {}
    for item in items:
        key = key_fn(item)
        grouped[key] = group_reducer(grouped.get(key), item)
    return grouped
