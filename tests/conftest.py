"""Shared test fixtures for bottlefetch."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from bottlefetch.config import FetchConfig
from bottlefetch.core.cache import BottleCache
from bottlefetch.core.hasher import sha256_hex
from bottlefetch.core.http import HttpClient

TAG = "x86_64_linux"
OTHER_TAG = "arm64_sonoma"
API = "https://bottles.test/api/bottle"


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Provide a temporary cache root (not created yet)."""
    return tmp_path / "cache"


@pytest.fixture
def fetch_config(cache_dir: Path) -> FetchConfig:
    """Provide a FetchConfig pinned to temp paths and a fixed tag."""
    return FetchConfig(
        cache_dir=cache_dir,
        platform_tag=TAG,
        api_domain=API,
        linux_api_domain=API + "/linux",
        http_timeout_seconds=5.0,
    )


@pytest.fixture
def http() -> HttpClient:
    return HttpClient(timeout=5.0, chunk_size=4)


@pytest.fixture
def cache(cache_dir: Path, http: HttpClient) -> BottleCache:
    """Provide a BottleCache in a temp directory."""
    return BottleCache(cache_dir, http)


# ---------------------------------------------------------------------------
# Bottle and manifest factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_bottle() -> Callable[..., tuple[bytes, str]]:
    """Factory fixture: bottle bytes and their sha256 digest."""

    def _factory(name: str = "foo", version: str = "1.0") -> tuple[bytes, str]:
        payload = f"bottle:{name}:{version}".encode()
        return payload, sha256_hex(payload)

    return _factory


@pytest.fixture
def make_node() -> Callable[..., dict[str, Any]]:
    """Factory fixture: a manifest node dict with one bottle for ``tag``."""

    def _factory(
        name: str = "foo",
        version: str = "1.0",
        *,
        sha256: str | None = None,
        url: str | None = None,
        tag: str = TAG,
        rebuild: int = 0,
        with_bottle: bool = True,
    ) -> dict[str, Any]:
        bottles: dict[str, Any] = {}
        if with_bottle:
            entry: dict[str, Any] = {"url": url or f"https://dl.test/{name}-{version}.tar.gz"}
            if sha256 is not None:
                entry["sha256"] = sha256
            bottles[tag] = entry
        return {
            "name": name,
            "pkg_version": version,
            "rebuild": rebuild,
            "bottles": bottles,
        }

    return _factory


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a manifest dict to a JSON file and return its path."""

    def _factory(data: dict[str, Any], filename: str = "manifest.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _factory
