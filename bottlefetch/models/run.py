"""Run-level models: flags, the collaborator hand-off, and run results."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class RunFlags(BaseModel):
    """Flags shared by every package in one run."""

    model_config = ConfigDict(frozen=True)

    force: bool = False
    keep_tmp: bool = False
    display_times: bool = False
    debug: bool = False
    quiet: bool = False
    verbose: bool = False
    fail_fast: bool = False


class ResolutionRequest(BaseModel):
    """What the pipeline hands the package-resolution collaborator per source.

    ``dependency_paths`` maps dependency name to its verified bottle; it is
    passed explicitly with each request rather than kept in shared state.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    name: str
    version: str
    platform_tag: str
    bottle_path: Path
    dependency_paths: dict[str, Path] = Field(default_factory=dict)


class Package(BaseModel):
    """An installable package produced by the resolution collaborator."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    platform_tag: str
    bottle_path: Path
    dependency_paths: dict[str, Path] = Field(default_factory=dict)


class SourceFailure(BaseModel):
    """A manifest source that yielded no package because of a fatal error."""

    model_config = ConfigDict(frozen=True)

    source: str
    package: str | None = None
    error_kind: str
    message: str


class InstallFailure(BaseModel):
    """A package the install collaborator refused or failed to install."""

    model_config = ConfigDict(frozen=True)

    package: str
    message: str


class PipelineResult(BaseModel):
    """Outcome of one pipeline run, in input order."""

    model_config = ConfigDict(frozen=True)

    packages: list[Package] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failures: list[SourceFailure] = Field(default_factory=list)
    install_failures: list[InstallFailure] = Field(default_factory=list)
    install_times: dict[str, float] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.install_failures
