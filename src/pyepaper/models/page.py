"""Paginated response envelope."""

from __future__ import annotations

from pydantic import Field

from pyepaper.models._base import EpaperBaseModel


class PageEnvelope(EpaperBaseModel):
    """The part of a paginated response the accumulator relies on.

    Only ``count`` (total number of records across all pages) is
    validated; the page payload itself is left to the loader's transform.
    """

    count: int = Field(..., ge=0, description="Total records across all pages")
