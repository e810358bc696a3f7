#!/usr/bin/env python3
"""Dump the state pyepaper can load from a display server.

Loads settings, variables and screen metadata, optionally the bitmap
list and individual bitmaps, and prints the resulting state as JSON.

Usage
-----
Set environment variables and run::

    export EPAPER_BASE_URL="http://epaper.local"
    python scripts/dump_state.py --bitmaps --bitmap /bitmaps/logo.bin

Options::

    --bitmaps            Also load bitmap metadata
    --bitmap PATH        Fetch this bitmap through the cache (repeatable)
    --output FILE        Write output to FILE instead of stdout
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyepaper import EpaperClient, EpaperConfig, EpaperError  # noqa: E402


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump the client-side state pyepaper loads from a display server.",
    )
    parser.add_argument("--bitmaps", action="store_true", help="Also load bitmap metadata")
    parser.add_argument("--bitmap", action="append", default=[], help="Fetch this bitmap through the cache")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = EpaperConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "api_url": config.api_url,
        "fetched_bitmaps": {},
    }

    async with EpaperClient(config) as client:
        try:
            await client.load_initial_state()
            if args.bitmaps or args.bitmap:
                await client.load_bitmaps()
            for filename in args.bitmap:
                data = await client.load_bitmap(filename)
                result["fetched_bitmaps"][filename] = len(data)
        except EpaperError as exc:
            print(f"Load failed: {exc}", file=sys.stderr)
            result["error"] = str(exc)
        result["state"] = client.state.model_dump(mode="json")

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 1 if "error" in result else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
