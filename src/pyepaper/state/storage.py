"""Durable key/value storage for state that must survive restarts.

Only the bitmap cache is persisted.  The interface is deliberately the
shape of a browser ``localStorage``: string keys, string values, missing
keys read as ``None``.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Protocol

from pyepaper.exceptions import EpaperStorageError

_logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_valid_key(key: str) -> bool:
    """Whether *key* can be used as a file name by :class:`FileStorage`."""
    return bool(_SAFE_KEY.match(key))


class Storage(Protocol):
    """Structural storage interface used by the bitmap cache and bootstrap."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage, mainly for tests and ephemeral clients."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class FileStorage:
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary sibling first and are moved into place with
    :func:`os.replace`, so a reader never observes a half-written file.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not is_valid_key(key):
            raise EpaperStorageError(f"Invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise EpaperStorageError(f"Failed to write {path}: {exc}") from exc
        _logger.debug("Wrote %d bytes to %s", len(value), path)
