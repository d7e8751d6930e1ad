"""Error kinds raised by the fetch pipeline.

Every error carries the manifest ``source`` and the ``package`` it concerns
(when known) so the CLI can report failures with context.
"""

from __future__ import annotations


class BottleFetchError(RuntimeError):
    """Base class for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        package: str | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.package = package

    @property
    def kind(self) -> str:
        return type(self).__name__


class ManifestNotFound(BottleFetchError):
    """Neither a local file nor a fetchable URL."""


class ManifestFetchFailed(BottleFetchError):
    """The manifest URL returned a non-success response."""


class ManifestParseError(BottleFetchError):
    """The manifest text is not valid JSON or not a valid manifest."""


class NoArtifactForPlatform(BottleFetchError):
    """The primary package has no bottle for the current platform tag."""


class ChecksumUnresolvable(BottleFetchError):
    """No sha256 in the manifest and the URL is not content-addressed."""


class ArtifactFetchFailed(BottleFetchError):
    """Transport failure while downloading a bottle."""


class ChecksumMismatch(BottleFetchError):
    """A downloaded bottle's digest disagrees with the expected digest."""


class PackageUnavailableError(BottleFetchError):
    """The package-resolution collaborator could not produce a package."""


class CannotInstallError(BottleFetchError):
    """The installer refused a package; reported, the batch continues."""


class InstallAlreadyAttemptedError(BottleFetchError):
    """The package was already attempted as a dependency in this batch."""


class UnsupportedPlatformError(BottleFetchError):
    """The host OS/architecture has no bottle tag."""
