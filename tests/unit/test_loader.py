"""Tests for manifest loading and parsing."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import requests

from bottlefetch.config import FetchConfig
from bottlefetch.core.errors import ManifestFetchFailed, ManifestNotFound, ManifestParseError
from bottlefetch.core.http import HttpClient
from bottlefetch.core.loader import ManifestLoader, manifest_url, parse_manifest

API = "https://bottles.test/api/bottle"
MANIFEST = {"name": "foo", "pkg_version": "1.0", "rebuild": 0, "bottles": {}, "dependencies": []}


@pytest.fixture
def loader(fetch_config: FetchConfig, http: HttpClient) -> ManifestLoader:
    return ManifestLoader(fetch_config, http, system="Darwin")


class TestManifestUrl:
    def test_bare_name(self):
        assert manifest_url("wget", API) == f"{API}/wget.json"

    def test_trailing_slash(self):
        assert manifest_url("wget", API + "/") == f"{API}/wget.json"

    def test_url_unchanged(self):
        assert manifest_url("http://x.test/m.json", API) == "http://x.test/m.json"


class TestManifestLoader:
    def test_local_file(self, loader: ManifestLoader, write_manifest: Callable[..., Path], requests_mock):
        path = write_manifest(MANIFEST)
        manifest = loader.load(str(path))
        assert manifest.name == "foo"
        assert requests_mock.call_count == 0

    def test_bare_name_uses_api_domain(self, loader: ManifestLoader, requests_mock):
        requests_mock.get(f"{API}/foo.json", text=json.dumps(MANIFEST))
        assert loader.load("foo").name == "foo"
        assert requests_mock.call_count == 1

    def test_linux_api_domain(self, fetch_config: FetchConfig, http: HttpClient, requests_mock):
        requests_mock.get(f"{API}/linux/foo.json", text=json.dumps(MANIFEST))
        loader = ManifestLoader(fetch_config, http, system="Linux")
        assert loader.load("foo").name == "foo"

    def test_explicit_url(self, loader: ManifestLoader, requests_mock):
        requests_mock.get("https://other.test/foo.json", text=json.dumps(MANIFEST))
        text, origin = loader.load_text("https://other.test/foo.json")
        assert origin == "https://other.test/foo.json"
        assert json.loads(text)["name"] == "foo"

    def test_http_error_names_url(self, loader: ManifestLoader, requests_mock):
        requests_mock.get(f"{API}/nope.json", status_code=404)
        with pytest.raises(ManifestFetchFailed) as excinfo:
            loader.load("nope")
        assert f"{API}/nope.json" in str(excinfo.value)
        assert excinfo.value.source == f"{API}/nope.json"

    def test_connection_error(self, loader: ManifestLoader, requests_mock):
        requests_mock.get(f"{API}/foo.json", exc=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(ManifestNotFound):
            loader.load("foo")

    def test_missing_local_path(self, loader: ManifestLoader, tmp_path: Path, requests_mock):
        with pytest.raises(ManifestNotFound):
            loader.load(str(tmp_path / "missing.json"))
        assert requests_mock.call_count == 0

    def test_tap_qualified_name_uses_api_domain(self, loader: ManifestLoader, requests_mock):
        requests_mock.get(f"{API}/user/tap/foo.json", json=MANIFEST)
        assert loader.load("user/tap/foo").name == "foo"

    def test_non_utf8_file(self, loader: ManifestLoader, tmp_path: Path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'\xff{"name": "foo"}')
        with pytest.raises(ManifestParseError) as excinfo:
            loader.load(str(path))
        assert excinfo.value.source == str(path)

    def test_unreadable_file(
        self,
        loader: ManifestLoader,
        write_manifest: Callable[..., Path],
        monkeypatch: pytest.MonkeyPatch,
    ):
        path = write_manifest(MANIFEST)

        def _denied(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "read_text", _denied)
        with pytest.raises(ManifestNotFound) as excinfo:
            loader.load(str(path))
        assert excinfo.value.source == str(path)
        assert "Permission denied" in str(excinfo.value)

    def test_html_error_page(self, loader: ManifestLoader, requests_mock):
        requests_mock.get(f"{API}/foo.json", text="<html>Service Unavailable</html>")
        with pytest.raises(ManifestParseError) as excinfo:
            loader.load("foo")
        assert f"{API}/foo.json" in str(excinfo.value)


class TestParseManifest:
    def test_invalid_json_names_source(self):
        with pytest.raises(ManifestParseError) as excinfo:
            parse_manifest("{not json", "/tmp/broken.json")
        assert "/tmp/broken.json" in str(excinfo.value)
        assert excinfo.value.source == "/tmp/broken.json"

    def test_non_object(self):
        with pytest.raises(ManifestParseError):
            parse_manifest("[1, 2]", "list.json")

    def test_unsafe_name_rejected(self):
        data = {"name": "../../escaped", "pkg_version": "1.0"}
        with pytest.raises(ManifestParseError) as excinfo:
            parse_manifest(json.dumps(data), "evil.json")
        assert excinfo.value.source == "evil.json"

    def test_schema_violation(self):
        data: dict[str, Any] = {"name": "foo", "pkg_version": "1.0", "rebuild": "lots"}
        with pytest.raises(ManifestParseError) as excinfo:
            parse_manifest(json.dumps(data), "bad.json")
        assert excinfo.value.package == "foo"
        assert "bad.json" in str(excinfo.value)
