"""HTTP transport for the display server's REST API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from pyepaper._constants import USER_AGENT
from pyepaper.config import EpaperConfig
from pyepaper.exceptions import EpaperTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Anything that can GET a path below the display server's API root.

    ``get`` returns the decoded JSON body, or raw bytes when ``binary`` is
    set, and raises :class:`EpaperTransportError` on failure.
    """

    async def get(self, path: str, *, binary: bool = False) -> Any:
        ...


class HttpTransport:
    """GET-only JSON/binary transport on top of an ``aiohttp`` session."""

    def __init__(self, config: EpaperConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get(self, path: str, *, binary: bool = False) -> Any:
        """Fetch *path* relative to the configured API URL.

        Returns the decoded JSON body, or the raw bytes when *binary* is set.
        """
        url = f"{self._config.api_url}{path}"
        headers = {
            "accept": "application/octet-stream" if binary else "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                if resp.status != 200:
                    text = await resp.text(errors="replace")
                    raise EpaperTransportError(
                        f"HTTP {resp.status} from {path}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=path,
                    )
                if binary:
                    return await resp.read()
                text = await resp.text()
        except EpaperTransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise EpaperTransportError(
                f"Request to {path} failed: {exc!r}",
                endpoint=path,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise EpaperTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                endpoint=path,
            ) from exc
