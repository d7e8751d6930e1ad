"""Manifest models — the parsed shape of a bottle JSON manifest.

Only the fields the fetch pipeline needs are modelled; anything else the
API returns is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ArtifactEntry(BaseModel):
    """One prebuilt bottle for a single platform tag.

    ``sha256`` may be absent, in which case the digest must be derivable
    from a content-addressed ``url``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = Field(min_length=1)
    sha256: str | None = None


class ManifestNode(BaseModel):
    """A package with its per-platform bottles.

    Used directly for dependency entries; ``Manifest`` extends it with the
    dependency list for the top-level package.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    pkg_version: str = Field(min_length=1)
    rebuild: int = Field(default=0, ge=0)
    bottles: dict[str, ArtifactEntry] = Field(default_factory=dict)

    @field_validator("name", "pkg_version")
    @classmethod
    def _single_path_component(cls, value: str) -> str:
        # Both end up in a cache filename.
        if value.startswith(".") or ".." in value or any(c in value for c in "/\\\0"):
            raise ValueError(f"unsafe for a filename: {value!r}")
        return value


class Manifest(ManifestNode):
    """The top-level manifest document.

    Dependencies are processed one level deep; any ``dependencies`` key
    nested inside a dependency entry is ignored.
    """

    dependencies: list[ManifestNode] = Field(default_factory=list)
