"""
System maintenance: upgrade installed packages and record what is installed.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.persistence.artifacts import atomic_write_text

logger = logging.getLogger(__name__)

UPDATE_STEP = "system-update"
LISTING_STEP = "installed-apps"


def update_system_apps(ctx: StepContext) -> Receipt:
    backend = ctx.installer.backend

    if not ctx.config.upgrade_packages:
        logger.info("Package upgrade disabled (upgrade_packages: false).")
        return Receipt.skip(step=UPDATE_STEP, reason="upgrade disabled")

    ctx.installer.ensure_backend()
    if ctx.dry_run:
        logger.info("[DRY-RUN] Would update %s packages.", backend.name)
        return Receipt.skip(step=UPDATE_STEP, reason=f"[dry-run] would upgrade via {backend.name}")

    backend.upgrade_all()
    return Receipt.success(step=UPDATE_STEP, output=f"{backend.name} packages upgraded")


def log_installed_apps(ctx: StepContext) -> Receipt:
    target = ctx.config.installed_apps_file
    ctx.installer.ensure_backend()

    if ctx.dry_run:
        logger.info("[DRY-RUN] Would log installed applications to %s.", target)
        return Receipt.skip(step=LISTING_STEP, reason=f"[dry-run] {target} not written")

    listing = ctx.installer.backend.list_installed()
    atomic_write_text(target, listing)
    count = len([line for line in listing.splitlines() if line.strip()])
    logger.info("Installed apps logged to %s", target)
    return Receipt.success(
        step=LISTING_STEP,
        output=f"{count} packages listed",
        metadata={"path": str(target), "count": count},
    )
