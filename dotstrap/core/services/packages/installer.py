"""
Package installer — idempotent, dry-run aware installs through one backend.

The installer is the only thing feature steps use to make packages
present.  It checks first, installs only when absent, and in dry-run
mode logs what it would have done instead of doing it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from dotstrap.core.errors import InstallError, PackageManagerMissing
from dotstrap.core.models.package import InstallOutcome, PackageRequest
from dotstrap.core.services.packages.backends import PackageBackend

logger = logging.getLogger(__name__)


def _as_request(package: PackageRequest | str) -> PackageRequest:
    if isinstance(package, PackageRequest):
        return package
    return PackageRequest(name=package)


class PackageInstaller:
    """Install packages through a single backend.

    Args:
        backend: The backend selected for this run.
        dry_run: Log intended installs instead of performing them.
    """

    def __init__(self, backend: PackageBackend, dry_run: bool = False):
        self.backend = backend
        self.dry_run = dry_run

    def __repr__(self) -> str:
        return f"<PackageInstaller backend={self.backend.name!r} dry_run={self.dry_run}>"

    def ensure_backend(self) -> None:
        """Raise PackageManagerMissing if the backend binary is absent."""
        if not self.backend.is_available():
            raise PackageManagerMissing(self.backend.name)

    def is_installed(self, package: PackageRequest | str) -> bool:
        self.ensure_backend()
        return self.backend.is_installed(_as_request(package))

    def install(self, package: PackageRequest | str) -> InstallOutcome:
        """Make sure a package is present.

        Returns:
            ALREADY_PRESENT, INSTALLED, or DRY_RUN when the install was
            only logged.

        Raises:
            PackageManagerMissing: The backend binary is not on PATH.
            InstallError: The backend failed to install the package.
        """
        request = _as_request(package)
        backend = self.backend.name

        if self.is_installed(request):
            logger.info("%s is already installed. Skipping installation.", request.name)
            return InstallOutcome.ALREADY_PRESENT

        if self.dry_run:
            logger.info("[DRY-RUN] Would install %s via %s.", request.name, backend)
            return InstallOutcome.DRY_RUN

        logger.info("Installing %s via %s...", request.name, backend)
        self.backend.install(request)
        logger.info("%s installed.", request.name)
        return InstallOutcome.INSTALLED

    def install_first(
        self,
        candidates: Sequence[PackageRequest | str],
    ) -> tuple[PackageRequest, InstallOutcome]:
        """Install the first candidate that succeeds.

        Used where the same tool ships under different names across
        distributions.  A candidate that is already present wins
        immediately.

        Raises:
            InstallError: Every candidate failed (the last error is raised).
        """
        if not candidates:
            raise ValueError("install_first needs at least one candidate")

        last_error: InstallError | None = None
        for candidate in candidates:
            request = _as_request(candidate)
            try:
                return request, self.install(request)
            except InstallError as e:
                logger.warning("%s", e)
                last_error = e

        assert last_error is not None
        raise last_error
