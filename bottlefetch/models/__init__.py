"""bottlefetch data models — all Pydantic v2, all frozen (immutable)."""

from bottlefetch.models.artifacts import BottleFilename, CachedArtifact, ResolvedArtifact
from bottlefetch.models.manifest import ArtifactEntry, Manifest, ManifestNode
from bottlefetch.models.run import (
    InstallFailure,
    Package,
    PipelineResult,
    ResolutionRequest,
    RunFlags,
    SourceFailure,
)

__all__ = [
    # manifest
    "ArtifactEntry",
    "Manifest",
    "ManifestNode",
    # artifacts
    "BottleFilename",
    "CachedArtifact",
    "ResolvedArtifact",
    # run
    "InstallFailure",
    "Package",
    "PipelineResult",
    "ResolutionRequest",
    "RunFlags",
    "SourceFailure",
]
