"""Client configuration for pyepaper."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from pyepaper._constants import (
    BITMAP_CACHE_KEY,
    DEFAULT_API_PREFIX,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
)
from pyepaper.exceptions import EpaperConfigError
from pyepaper.state.storage import is_valid_key


def _default_storage_dir() -> str:
    return str(Path.home() / ".cache" / "pyepaper")


@dataclasses.dataclass(frozen=True)
class EpaperConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Scheme and host of the display server (no trailing slash).
    api_prefix : str
        Path prefix prepended to every endpoint path.
    storage_dir : str
        Directory used by :class:`~pyepaper.state.storage.FileStorage`
        for the durable bitmap cache.
    request_timeout : float
        Total timeout in seconds applied to each HTTP request.
    bitmap_cache_key : str
        Durable storage key the bitmap cache is persisted under.
    """

    base_url: str = DEFAULT_BASE_URL
    api_prefix: str = DEFAULT_API_PREFIX
    storage_dir: str = dataclasses.field(default_factory=_default_storage_dir)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    bitmap_cache_key: str = BITMAP_CACHE_KEY

    def __post_init__(self) -> None:
        if not is_valid_key(self.bitmap_cache_key):
            raise EpaperConfigError(
                f"bitmap_cache_key must only contain letters, digits, '_', '.' or '-': {self.bitmap_cache_key!r}"
            )

    @property
    def api_url(self) -> str:
        """Base URL joined with the API prefix."""
        return f"{self.base_url.rstrip('/')}{self.api_prefix}"

    @classmethod
    def from_env(cls, **overrides: Any) -> EpaperConfig:
        """Create configuration from ``EPAPER_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "EPAPER_BASE_URL": "base_url",
            "EPAPER_API_PREFIX": "api_prefix",
            "EPAPER_STORAGE_DIR": "storage_dir",
            "EPAPER_BITMAP_CACHE_KEY": "bitmap_cache_key",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # request_timeout is numeric, handle separately
        timeout_env = env.get("EPAPER_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise EpaperConfigError(f"EPAPER_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
