"""Package resolution — turn a verified bottle (or a name) into a Package.

``BottleResolver`` builds packages from bottle files and from the explicit
name-to-bottle mapping passed with each call. ``CacheFallbackResolver``
wraps any resolver: when it cannot find a package by name, the newest
cached bottle for that name is used instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from bottlefetch.core.cache import BottleCache
from bottlefetch.core.errors import PackageUnavailableError
from bottlefetch.models.artifacts import BottleFilename
from bottlefetch.models.run import Package

logger = logging.getLogger(__name__)


class PackageResolver(Protocol):
    """Resolves a package name or a local bottle path into a ``Package``."""

    def resolve(
        self,
        ref: str | Path,
        *,
        dependency_paths: Mapping[str, Path] | None = None,
    ) -> Package:
        """Return the package for ``ref``; raise ``PackageUnavailableError`` if none."""
        ...


class BottleResolver:
    """Builds packages from bottle files named by the cache filename scheme."""

    def resolve(
        self,
        ref: str | Path,
        *,
        dependency_paths: Mapping[str, Path] | None = None,
    ) -> Package:
        dependency_paths = dict(dependency_paths or {})
        path = Path(ref)
        if not path.is_file():
            # A bare name resolves only through the mapping passed in.
            mapped = dependency_paths.get(str(ref))
            if mapped is None or not mapped.is_file():
                raise PackageUnavailableError(
                    f"No available package named {ref}", package=str(ref)
                )
            path = mapped

        parsed = BottleFilename.parse(path.name)
        if parsed is None:
            raise PackageUnavailableError(
                f"{path} is not a recognised bottle file", package=str(ref)
            )
        return Package(
            name=parsed.name,
            version=parsed.version,
            platform_tag=parsed.tag,
            bottle_path=path.resolve(),
            dependency_paths={k: v for k, v in dependency_paths.items() if k != parsed.name},
        )


class CacheFallbackResolver:
    """Primary lookup first; on failure, the newest cached bottle for the name.

    Parameters
    ----------
    primary:
        The resolver tried first.
    cache:
        Scanned for ``{name}--*`` bottles when ``primary`` finds nothing.
    """

    def __init__(self, primary: PackageResolver, cache: BottleCache) -> None:
        self._primary = primary
        self._cache = cache

    def resolve(
        self,
        ref: str | Path,
        *,
        dependency_paths: Mapping[str, Path] | None = None,
    ) -> Package:
        try:
            return self._primary.resolve(ref, dependency_paths=dependency_paths)
        except PackageUnavailableError:
            if isinstance(ref, Path) or Path(str(ref)).name != str(ref):
                raise
            cached = self._cache.find_latest(str(ref))
            if cached is None:
                raise
            logger.info("Resolved %s from cached bottle %s", ref, cached.name)
            return self._primary.resolve(cached, dependency_paths=dependency_paths)
