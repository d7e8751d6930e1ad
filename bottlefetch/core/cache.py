"""Bottle cache — deterministic filenames, verified downloads, atomic promotion.

Layout: ``{cache_dir}/{name}--{version}.{tag}.bottle[.{rebuild}].tar.gz``

A bottle reaches its final name only after its digest has been verified:
downloads go to a hidden temp file in the same directory and are moved
into place with ``os.replace``. Concurrent runs writing the same bottle
race only on that rename, and both write identical verified bytes.
"""

from __future__ import annotations

import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path

import requests

from bottlefetch.core.errors import ArtifactFetchFailed, ChecksumMismatch
from bottlefetch.core.hasher import digests_equal, sha256_file
from bottlefetch.core.http import HttpClient
from bottlefetch.models.artifacts import BottleFilename, CachedArtifact, ResolvedArtifact

logger = logging.getLogger(__name__)

_TEMP_SUFFIX = ".incomplete"
_VERSION_PART_RE = re.compile(r"\d+|[A-Za-z]+")


def version_key(version: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key for loose version strings (``1.10`` > ``1.9``, ``1.0`` > ``1.0rc1``)."""
    key: list[tuple[int, int, str]] = []
    for part in _VERSION_PART_RE.findall(version):
        if part.isdigit():
            key.append((2, int(part), ""))
        else:
            key.append((0, 0, part.lower()))
    # End marker sorts above letters, so 1.0 > 1.0rc1 but below 1.0.1.
    key.append((1, 0, ""))
    return tuple(key)


class BottleCache:
    """Verified, deterministically named bottle storage.

    Parameters
    ----------
    cache_dir:
        Cache root; all writes are confined to this directory.
    http:
        Transport used for downloads; a default client if omitted.
    """

    def __init__(self, cache_dir: Path, http: HttpClient | None = None) -> None:
        self._dir = Path(cache_dir).expanduser()
        self._http = http or HttpClient()

    @property
    def cache_dir(self) -> Path:
        return self._dir

    def path_for(self, artifact: ResolvedArtifact) -> Path:
        """Final cache path for ``artifact``; never outside the cache root."""
        path = self._dir / artifact.filename
        if path.parent.resolve() != self._dir.resolve():
            raise ArtifactFetchFailed(
                f"Refusing to cache {artifact.filename!r} outside {self._dir}",
                package=artifact.name,
            )
        return path

    # ------------------------------------------------------------------
    # Materialize
    # ------------------------------------------------------------------

    def lookup(self, artifact: ResolvedArtifact) -> Path | None:
        """Return the cached path if present and its digest matches."""
        path = self.path_for(artifact)
        if not path.is_file():
            return None
        try:
            actual = sha256_file(path)
        except OSError as exc:
            raise ArtifactFetchFailed(
                f"Cannot read cached {path.name}: {exc}", package=artifact.name
            ) from exc
        if digests_equal(actual, artifact.sha256):
            return path
        logger.warning(
            "Cached %s does not match expected sha256 (%s != %s); refetching",
            path.name, actual, artifact.sha256,
        )
        return None

    def materialize(self, artifact: ResolvedArtifact, *, force: bool = False) -> CachedArtifact:
        """Ensure a verified copy of ``artifact`` is in the cache and return it.

        A verified existing entry is reused without a download unless
        ``force`` is set. Otherwise the bottle is downloaded once, verified,
        and atomically moved to its final name.

        Raises
        ------
        ArtifactFetchFailed
            The download failed at the transport level, or the cache
            directory could not be written.
        ChecksumMismatch
            The downloaded bytes do not match ``artifact.sha256``; nothing
            is left in the cache.
        """
        if not force:
            existing = self.lookup(artifact)
            if existing is not None:
                logger.info("Using cached %s", existing.name)
                return self._cached(artifact, existing, cache_hit=True)

        destination = self.path_for(artifact)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=self._dir, prefix=f".{destination.name}.", suffix=_TEMP_SUFFIX
            )
        except OSError as exc:
            raise ArtifactFetchFailed(
                f"Cannot write to cache {self._dir}: {exc}", package=artifact.name
            ) from exc
        temp_path = Path(temp_name)
        promoted = False
        try:
            logger.info("Downloading %s from %s", destination.name, artifact.url)
            digest = hashlib.sha256()
            try:
                with os.fdopen(fd, "wb") as fh:
                    for chunk in self._http.stream(artifact.url):
                        digest.update(chunk)
                        fh.write(chunk)
            except requests.RequestException as exc:
                raise ArtifactFetchFailed(
                    f"Failed to download {artifact.name} from {artifact.url}: {exc}",
                    package=artifact.name,
                ) from exc
            except OSError as exc:
                raise ArtifactFetchFailed(
                    f"Failed to write {temp_path.name} in {self._dir}: {exc}",
                    package=artifact.name,
                ) from exc

            actual = digest.hexdigest()
            if not digests_equal(actual, artifact.sha256):
                raise ChecksumMismatch(
                    f"SHA-256 mismatch for {artifact.name} from {artifact.url}\n"
                    f"  expected: {artifact.sha256}\n"
                    f"  actual:   {actual}",
                    package=artifact.name,
                )

            try:
                os.replace(temp_path, destination)
            except OSError as exc:
                raise ArtifactFetchFailed(
                    f"Failed to move {temp_path.name} to {destination}: {exc}",
                    package=artifact.name,
                ) from exc
            promoted = True
        finally:
            if not promoted:
                temp_path.unlink(missing_ok=True)

        logger.info("Verified %s", destination.name)
        return self._cached(artifact, destination, cache_hit=False)

    @staticmethod
    def _cached(artifact: ResolvedArtifact, path: Path, *, cache_hit: bool) -> CachedArtifact:
        return CachedArtifact(
            name=artifact.name,
            version=artifact.version,
            platform_tag=artifact.platform_tag,
            rebuild=artifact.rebuild,
            path=path,
            sha256=artifact.sha256.lower(),
            cache_hit=cache_hit,
        )

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def entries(self) -> list[tuple[BottleFilename, Path]]:
        """All bottles in the cache, sorted by filename. Temp files are ignored."""
        if not self._dir.is_dir():
            return []
        found: list[tuple[BottleFilename, Path]] = []
        for path in sorted(self._dir.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            parsed = BottleFilename.parse(path.name)
            if parsed is not None:
                found.append((parsed, path))
        return found

    def find_latest(self, name: str, platform_tag: str | None = None) -> Path | None:
        """Newest cached bottle for ``name`` (highest version, then rebuild)."""
        candidates = [
            (parsed, path)
            for parsed, path in self.entries()
            if parsed.name == name and (platform_tag is None or parsed.tag == platform_tag)
        ]
        if not candidates:
            return None
        _, path = max(
            candidates,
            key=lambda item: (version_key(item[0].version), item[0].rebuild),
        )
        return path
