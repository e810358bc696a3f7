"""Custom exception hierarchy for pyepaper."""

from __future__ import annotations


class EpaperError(Exception):
    """Base exception for all pyepaper errors."""


class EpaperConfigError(EpaperError):
    """Invalid or missing configuration."""


class EpaperTransportError(EpaperError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class EpaperProtocolError(EpaperError):
    """Server response violated the paging or payload contract.

    Raised when a paginated endpoint stops making progress (a page adds
    no new keys while the reported total is still out of reach) or when
    a page omits its ``count``.  Retrying the same request is unlikely
    to help.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class EpaperStorageError(EpaperError):
    """Durable storage could not be written."""
