"""Install collaborator contract and the default reporting installer.

Unpacking and installing bottles is handled by an external installer; the
pipeline only drives it through the ``Installer`` protocol.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from bottlefetch.models.run import Package, RunFlags

logger = logging.getLogger(__name__)


class Installer(Protocol):
    """Operations the pipeline needs from an installer, in call order."""

    def should_install(self, package: Package, *, force: bool) -> bool: ...

    def preinstall_checks(self) -> None: ...

    def migrate_if_needed(self, package: Package, *, force: bool) -> None: ...

    def install(self, package: Package, flags: RunFlags) -> None:
        """Install one package.

        Raises ``CannotInstallError`` to report a failure for this package
        only, or ``InstallAlreadyAttemptedError`` if the package was already
        handled as a dependency of another package in the batch.
        """
        ...

    def cleanup(self, package: Package) -> None: ...

    def check_installed_dependents(self, packages: list[Package], flags: RunFlags) -> None: ...


class ReportingInstaller:
    """Installer that records verified packages instead of installing them.

    Used by the CLI to hand verified bottles to the user; a package named in
    ``installed`` is skipped unless the run is forced.
    """

    def __init__(self, installed: Iterable[str] = ()) -> None:
        self._installed = set(installed)
        self.installed: list[Package] = []

    def should_install(self, package: Package, *, force: bool) -> bool:
        if package.name in self._installed and not force:
            logger.info("%s %s is already installed", package.name, package.version)
            return False
        return True

    def preinstall_checks(self) -> None:
        logger.debug("ReportingInstaller: no preinstall checks")

    def migrate_if_needed(self, package: Package, *, force: bool) -> None:
        logger.debug("ReportingInstaller: no migration for %s", package.name)

    def install(self, package: Package, flags: RunFlags) -> None:
        logger.info("Ready to install %s from %s", package.name, package.bottle_path)
        self.installed.append(package)
        self._installed.add(package.name)

    def cleanup(self, package: Package) -> None:
        logger.debug("ReportingInstaller: nothing to clean for %s", package.name)

    def check_installed_dependents(self, packages: list[Package], flags: RunFlags) -> None:
        logger.debug("ReportingInstaller: skipping dependent check for %d package(s)", len(packages))
