"""Pydantic models for pyepaper records."""

from pyepaper.models.bitmap import CachedBitmap
from pyepaper.models.page import PageEnvelope

__all__ = [
    "CachedBitmap",
    "PageEnvelope",
]
