from __future__ import annotations

import pytest

from pyepaper.config import EpaperConfig
from pyepaper.exceptions import EpaperConfigError


def test_defaults() -> None:
    config = EpaperConfig()
    assert config.api_url == "http://epaper.local/api/v1"
    assert config.bitmap_cache_key == "bitmap_cache"
    assert config.request_timeout == 10.0


def test_api_url_strips_trailing_slash() -> None:
    assert EpaperConfig(base_url="http://10.0.0.5/").api_url == "http://10.0.0.5/api/v1"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPAPER_BASE_URL", "http://display.lan")
    monkeypatch.setenv("EPAPER_STORAGE_DIR", "/tmp/pyepaper-test")
    monkeypatch.setenv("EPAPER_REQUEST_TIMEOUT", "2.5")

    config = EpaperConfig.from_env()

    assert config.base_url == "http://display.lan"
    assert config.storage_dir == "/tmp/pyepaper-test"
    assert config.request_timeout == 2.5


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPAPER_BASE_URL", "http://display.lan")
    monkeypatch.setenv("EPAPER_REQUEST_TIMEOUT", "not-a-number")

    config = EpaperConfig.from_env(base_url="http://other", request_timeout=1.0)

    assert config.base_url == "http://other"
    assert config.request_timeout == 1.0


def test_invalid_timeout_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPAPER_REQUEST_TIMEOUT", "soon")
    with pytest.raises(EpaperConfigError):
        EpaperConfig.from_env()


@pytest.mark.parametrize("key", ["my cache", "../escape", "", "a/b"])
def test_invalid_bitmap_cache_key_rejected(key: str) -> None:
    with pytest.raises(EpaperConfigError):
        EpaperConfig(bitmap_cache_key=key)


def test_invalid_bitmap_cache_key_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EPAPER_BITMAP_CACHE_KEY", "my cache")
    with pytest.raises(EpaperConfigError):
        EpaperConfig.from_env()
