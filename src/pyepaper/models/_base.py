"""Base model for pyepaper wire and persisted records.

Records coming from the display server or from durable storage may carry
fields this library does not know about.  :class:`EpaperBaseModel` keeps
them (``extra="allow"``) so a round trip through the cache never drops
data written by another client.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

from pyepaper._hashing import normalize_hash


def _coerce_hash(value: Any) -> Any:
    normalized = normalize_hash(value)
    return value if normalized is None else normalized


ContentHash = Annotated[str | None, BeforeValidator(_coerce_hash)]
"""Optional digest; numeric values are stored as their decimal string."""


class EpaperBaseModel(BaseModel):
    """Base for all pyepaper models."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )
