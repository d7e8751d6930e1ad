"""Artifact selection — pick each package's bottle for the platform tag.

The primary package must have a bottle for the tag; a dependency without
one is skipped (the installer is expected to satisfy it another way).
Selection for the whole manifest happens before any download, so a missing
primary bottle aborts the source before any dependency is fetched.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from bottlefetch.core.checksum import resolve_checksum
from bottlefetch.core.errors import ChecksumUnresolvable, NoArtifactForPlatform
from bottlefetch.models.artifacts import ResolvedArtifact
from bottlefetch.models.manifest import ArtifactEntry, Manifest, ManifestNode

logger = logging.getLogger(__name__)


class SelectionPlan(BaseModel):
    """Bottles to materialize for one manifest, in declaration order."""

    model_config = ConfigDict(frozen=True)

    primary: ResolvedArtifact
    dependencies: list[ResolvedArtifact] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


def select_artifact(node: ManifestNode, platform_tag: str) -> ArtifactEntry | None:
    """Return the node's bottle for ``platform_tag``, or None."""
    return node.bottles.get(platform_tag)


def resolve_artifact(
    node: ManifestNode,
    entry: ArtifactEntry,
    platform_tag: str,
    *,
    source: str | None = None,
) -> ResolvedArtifact:
    """Attach a digest to a selected entry; raises if none can be resolved."""
    sha256 = resolve_checksum(entry)
    if sha256 is None:
        raise ChecksumUnresolvable(
            f"No sha256 for {node.name} ({platform_tag}) and {entry.url} "
            "is not a content-addressed URL",
            source=source,
            package=node.name,
        )
    return ResolvedArtifact(
        name=node.name,
        version=node.pkg_version,
        platform_tag=platform_tag,
        rebuild=node.rebuild,
        url=entry.url,
        sha256=sha256,
    )


def plan_artifacts(
    manifest: Manifest,
    platform_tag: str,
    *,
    source: str | None = None,
) -> SelectionPlan:
    """Select and resolve the primary bottle and every available dependency bottle."""
    entry = select_artifact(manifest, platform_tag)
    if entry is None:
        raise NoArtifactForPlatform(
            f"No bottle available for {manifest.name} on {platform_tag} "
            f"(available: {', '.join(sorted(manifest.bottles)) or 'none'})",
            source=source,
            package=manifest.name,
        )
    primary = resolve_artifact(manifest, entry, platform_tag, source=source)

    dependencies: list[ResolvedArtifact] = []
    skipped: list[str] = []
    for dep in manifest.dependencies:
        dep_entry = select_artifact(dep, platform_tag)
        if dep_entry is None:
            logger.info(
                "Skipping dependency %s of %s: no bottle for %s",
                dep.name, manifest.name, platform_tag,
            )
            skipped.append(dep.name)
            continue
        dependencies.append(resolve_artifact(dep, dep_entry, platform_tag, source=source))

    return SelectionPlan(primary=primary, dependencies=dependencies, skipped=skipped)
