"""Checksum resolution for bottle entries.

A digest comes from the manifest's ``sha256`` field when present, otherwise
from a content-addressed registry URL such as
``https://ghcr.io/v2/homebrew/core/wget/blobs/sha256:<64 hex>``.
"""

from __future__ import annotations

import re

from bottlefetch.models.manifest import ArtifactEntry

CONTENT_ADDRESSED_URL_RE = re.compile(
    r"^https?://[^/]+/(?:.+/)?blobs/sha256:(?P<sha256>[0-9a-fA-F]{64})$"
)


def checksum_from_url(url: str) -> str | None:
    """Extract the sha256 digest from a content-addressed URL, or None."""
    match = CONTENT_ADDRESSED_URL_RE.match(url)
    if match is None:
        return None
    return match["sha256"]


def resolve_checksum(entry: ArtifactEntry) -> str | None:
    """Explicit ``sha256`` verbatim, else the digest embedded in the URL."""
    if entry.sha256:
        return entry.sha256
    return checksum_from_url(entry.url)
