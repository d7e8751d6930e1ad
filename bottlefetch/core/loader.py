"""Manifest loading and parsing.

A manifest source is one of:

- a path to an existing local file — read from disk;
- an absolute ``http(s)://`` URL — fetched once;
- a bare or tap-qualified package name — expanded to ``{api_domain}/{name}.json`` and fetched once.
"""

from __future__ import annotations

import json
import logging
import platform
import re
from pathlib import Path

import requests
from pydantic import ValidationError

from bottlefetch.config import FetchConfig
from bottlefetch.core.errors import (
    ManifestFetchFailed,
    ManifestNotFound,
    ManifestParseError,
)
from bottlefetch.core.http import HttpClient
from bottlefetch.models.manifest import Manifest

logger = logging.getLogger(__name__)

_URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_url(source: str) -> bool:
    return _URL_SCHEME_RE.match(source) is not None


def _looks_like_path(source: str) -> bool:
    return source.endswith(".json")


def manifest_url(source: str, api_domain: str) -> str:
    """Expand a bare package name into its manifest API URL.

    Absolute URLs are returned unchanged.

    >>> manifest_url("wget", "https://formulae.brew.sh/api/bottle")
    'https://formulae.brew.sh/api/bottle/wget.json'
    """
    if is_url(source):
        return source
    return f"{api_domain.rstrip('/')}/{source}.json"


class ManifestLoader:
    """Obtains raw manifest text and parses it into a ``Manifest``.

    Parameters
    ----------
    config:
        Supplies the API domains.
    http:
        Transport used for remote manifests.
    system:
        OS family used to pick the API domain variant; defaults to the host.
    """

    def __init__(
        self,
        config: FetchConfig,
        http: HttpClient,
        *,
        system: str | None = None,
    ) -> None:
        self._config = config
        self._http = http
        self._system = system or platform.system()

    def load_text(self, source: str) -> tuple[str, str]:
        """Return ``(text, origin)`` where origin is the file path or URL read."""
        path = Path(source).expanduser()
        if path.is_file():
            logger.debug("Reading manifest from file %s", path)
            try:
                return path.read_text(encoding="utf-8"), str(path)
            except UnicodeDecodeError as exc:
                raise ManifestParseError(
                    f"Invalid JSON file: {path} (not UTF-8: {exc.reason})", source=str(path)
                ) from exc
            except OSError as exc:
                raise ManifestNotFound(
                    f"Cannot read manifest file {path}: {exc.strerror or exc}", source=str(path)
                ) from exc

        if not is_url(source) and _looks_like_path(source):
            raise ManifestNotFound(f"No such manifest file: {source}", source=source)

        url = manifest_url(source, self._config.api_domain_for(self._system))
        logger.info("Fetching manifest %s", url)
        try:
            return self._http.get_text(url), url
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise ManifestFetchFailed(
                f"No JSON file found at {url} (HTTP {status})", source=url
            ) from exc
        except requests.RequestException as exc:
            raise ManifestNotFound(
                f"Could not fetch manifest from {url}: {exc}", source=url
            ) from exc

    def load(self, source: str) -> Manifest:
        """Load and parse one manifest source."""
        text, origin = self.load_text(source)
        return parse_manifest(text, origin)


def parse_manifest(text: str, origin: str) -> Manifest:
    """Parse manifest JSON; any failure names ``origin`` in the error."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(
            f"Invalid JSON file: {origin} ({exc.msg} at line {exc.lineno})",
            source=origin,
        ) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Invalid JSON file: {origin} (expected an object, got {type(data).__name__})",
            source=origin,
        )

    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestParseError(
            f"Invalid manifest in {origin}: {exc.error_count()} validation error(s)\n{exc}",
            source=origin,
            package=data.get("name") if isinstance(data.get("name"), str) else None,
        ) from exc
