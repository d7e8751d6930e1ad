"""Pipeline orchestrator — load, select, verify and hand off, source by source.

For each manifest source, in order:

1. load and parse the manifest;
2. select the primary bottle (fatal if missing) and dependency bottles
   (skipped if missing) for the run's platform tag;
3. materialize every selected bottle into the cache;
4. resolve the primary bottle into a ``Package``, passing the dependency
   name-to-bottle mapping explicitly.

Packages the installer accepts are then installed as one ordered batch.
A fatal error for a source is recorded and the run moves on to the next
source, unless ``fail_fast`` is set.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from bottlefetch.config import FetchConfig
from bottlefetch.core.cache import BottleCache
from bottlefetch.core.errors import (
    BottleFetchError,
    CannotInstallError,
    InstallAlreadyAttemptedError,
)
from bottlefetch.core.http import HttpClient
from bottlefetch.core.installer import Installer, ReportingInstaller
from bottlefetch.core.loader import ManifestLoader
from bottlefetch.core.platform_tag import current_platform_tag
from bottlefetch.core.resolver import BottleResolver, CacheFallbackResolver, PackageResolver
from bottlefetch.core.selector import plan_artifacts
from bottlefetch.models.run import (
    InstallFailure,
    Package,
    PipelineResult,
    ResolutionRequest,
    RunFlags,
    SourceFailure,
)

logger = logging.getLogger(__name__)


class Pipeline:
    """Sequential fetch-and-hand-off pipeline.

    Parameters
    ----------
    config:
        Runtime configuration. Uses the environment-driven defaults if omitted.
    http:
        Transport shared by the manifest loader and the cache.
    resolver:
        Package-resolution collaborator. Defaults to a ``BottleResolver``
        with cache fallback.
    installer:
        Install collaborator. Defaults to ``ReportingInstaller``.
    platform_tag:
        Explicit tag; otherwise ``config.platform_tag`` or the host's tag.
    system:
        OS family for choosing the manifest API domain; defaults to the host.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        *,
        http: HttpClient | None = None,
        resolver: PackageResolver | None = None,
        installer: Installer | None = None,
        platform_tag: str | None = None,
        system: str | None = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.http = http or HttpClient(
            self.config.http_timeout_seconds, chunk_size=self.config.chunk_size
        )
        self.loader = ManifestLoader(self.config, self.http, system=system)
        self.cache = BottleCache(self.config.cache_dir, self.http)
        self.resolver = resolver or CacheFallbackResolver(BottleResolver(), self.cache)
        self.installer = installer or ReportingInstaller()
        self._platform_tag = platform_tag or self.config.platform_tag

    @property
    def platform_tag(self) -> str:
        """The run's platform tag, resolved once."""
        if self._platform_tag is None:
            self._platform_tag = current_platform_tag()
            logger.debug("Resolved platform tag %s", self._platform_tag)
        return self._platform_tag

    # ------------------------------------------------------------------
    # Per-source fetch
    # ------------------------------------------------------------------

    def fetch_source(self, source: str) -> ResolutionRequest:
        """Load one manifest and materialize its bottles.

        Returns the hand-off for the resolution collaborator. Any
        ``BottleFetchError`` propagates with ``source`` filled in.
        """
        try:
            manifest = self.loader.load(source)
            plan = plan_artifacts(manifest, self.platform_tag, source=source)

            primary = self.cache.materialize(plan.primary)
            dependency_paths = {}
            for dep in plan.dependencies:
                dependency_paths[dep.name] = self.cache.materialize(dep).path
        except BottleFetchError as exc:
            if exc.source is None:
                exc.source = source
            raise

        return ResolutionRequest(
            source=source,
            name=primary.name,
            version=primary.version,
            platform_tag=primary.platform_tag,
            bottle_path=primary.path,
            dependency_paths=dependency_paths,
        )

    def resolve_source(self, source: str) -> Package:
        """Fetch one source and resolve it into an installable package."""
        request = self.fetch_source(source)
        try:
            return self.resolver.resolve(
                request.bottle_path, dependency_paths=request.dependency_paths
            )
        except BottleFetchError as exc:
            if exc.source is None:
                exc.source = source
            raise

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, sources: Sequence[str], flags: RunFlags | None = None) -> PipelineResult:
        """Process every source in order, then install the accepted batch."""
        flags = flags or RunFlags()
        packages: list[Package] = []
        skipped: list[str] = []
        failures: list[SourceFailure] = []

        for source in sources:
            try:
                package = self.resolve_source(source)
            except BottleFetchError as exc:
                logger.error("%s: %s", source, exc)
                failures.append(
                    SourceFailure(
                        source=source,
                        package=exc.package,
                        error_kind=exc.kind,
                        message=str(exc),
                    )
                )
                if flags.fail_fast:
                    break
                continue

            if not self.installer.should_install(package, force=flags.force):
                skipped.append(package.name)
                continue
            packages.append(package)

        if not packages:
            return PipelineResult(skipped=skipped, failures=failures)

        install_failures, install_times = self._install(packages, flags)
        return PipelineResult(
            packages=packages,
            skipped=skipped,
            failures=failures,
            install_failures=install_failures,
            install_times=install_times,
        )

    def _install(
        self, packages: list[Package], flags: RunFlags
    ) -> tuple[list[InstallFailure], dict[str, float]]:
        failures: list[InstallFailure] = []
        times: dict[str, float] = {}

        self.installer.preinstall_checks()
        for package in packages:
            self.installer.migrate_if_needed(package, force=flags.force)
            started = time.monotonic()
            try:
                self.installer.install(package, flags)
            except InstallAlreadyAttemptedError:
                # Already installed as a dependency of an earlier package.
                pass
            except CannotInstallError as exc:
                logger.error("Cannot install %s: %s", package.name, exc)
                failures.append(InstallFailure(package=package.name, message=str(exc)))
            else:
                times[package.name] = time.monotonic() - started
            self.installer.cleanup(package)

        self.installer.check_installed_dependents(packages, flags)
        return failures, times
