"""Resolved and cached artifact models, plus the bottle filename scheme."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

_FILENAME_RE = re.compile(
    r"^(?P<name>.+?)--(?P<version>.+)\.(?P<tag>[^.]+)\.bottle"
    r"(?:\.(?P<rebuild>\d+))?\.tar\.gz$"
)


class BottleFilename(BaseModel):
    """Deterministic cache filename for a bottle.

    Format: ``{name}--{version}.{tag}.bottle[.{rebuild}].tar.gz``. The
    rebuild segment is omitted for rebuild 0, so every distinct
    (name, version, tag, rebuild) tuple maps to a distinct filename.

    Examples
    --------
    >>> str(BottleFilename(name="foo", version="1.0", tag="x86_64_linux"))
    'foo--1.0.x86_64_linux.bottle.tar.gz'
    >>> str(BottleFilename(name="foo", version="1.0", tag="x86_64_linux", rebuild=2))
    'foo--1.0.x86_64_linux.bottle.2.tar.gz'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    tag: str
    rebuild: int = 0

    @property
    def extname(self) -> str:
        suffix = f".{self.rebuild}" if self.rebuild > 0 else ""
        return f".{self.tag}.bottle{suffix}.tar.gz"

    def __str__(self) -> str:
        return f"{self.name}--{self.version}{self.extname}"

    @classmethod
    def parse(cls, filename: str) -> BottleFilename | None:
        """Parse a cache filename back into its parts; None if it is not a bottle."""
        match = _FILENAME_RE.match(filename)
        if match is None:
            return None
        return cls(
            name=match["name"],
            version=match["version"],
            tag=match["tag"],
            rebuild=int(match["rebuild"] or 0),
        )


class ResolvedArtifact(BaseModel):
    """A bottle selected for the current platform with its digest resolved.

    Built per package during selection and handed straight to the cache.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    platform_tag: str
    rebuild: int = 0
    url: str
    sha256: str

    @property
    def filename(self) -> str:
        return str(
            BottleFilename(
                name=self.name,
                version=self.version,
                tag=self.platform_tag,
                rebuild=self.rebuild,
            )
        )


class CachedArtifact(BaseModel):
    """A verified bottle on disk under the cache root."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    platform_tag: str
    rebuild: int = 0
    path: Path
    sha256: str
    cache_hit: bool = False
