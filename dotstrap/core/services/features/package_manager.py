"""
Package manager bootstrap.

On macOS a missing Homebrew is installed with its official installer.
Linux package managers come with the distribution; if the selected one
is missing there is nothing sensible to install it with.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.errors import InstallError, PackageManagerMissing
from dotstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

STEP = "package-manager"

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"


def homebrew_install_command() -> list[str]:
    return ["/bin/bash", "-c", f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"']


def ensure_package_manager(ctx: StepContext) -> Receipt:
    backend = ctx.installer.backend

    if backend.is_available():
        logger.info("%s is already installed.", backend.name)
        return Receipt.success(step=STEP, output=f"{backend.name} available")

    if not ctx.profile.is_macos:
        raise PackageManagerMissing(backend.name)

    logger.info("Homebrew not found. Installing Homebrew...")
    if ctx.dry_run:
        logger.info("[DRY-RUN] Would install Homebrew.")
        return Receipt.skip(step=STEP, reason="[dry-run] would install Homebrew")

    result = ctx.runner.run(homebrew_install_command(), capture=False)
    if not result.ok:
        raise InstallError("homebrew", "installer script", result.error)

    logger.info("Homebrew installed.")
    return Receipt.success(step=STEP, output="Homebrew installed", metadata={"installed": True})
