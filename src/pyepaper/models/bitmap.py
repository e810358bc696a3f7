"""Bitmap cache records."""

from __future__ import annotations

from pydantic import ConfigDict

from pyepaper.models._base import ContentHash, EpaperBaseModel


class CachedBitmap(EpaperBaseModel):
    """A locally cached bitmap payload.

    Parameters
    ----------
    data : str
        Base64-encoded raw bitmap bytes.
    hash : str
        Fingerprint of the decoded bytes at the time they were written.
    """

    model_config = ConfigDict(frozen=True)

    data: str = ""
    hash: ContentHash = None
