"""
Shared helpers for feature steps.
"""

from __future__ import annotations

import logging

from dotstrap.core.models.package import InstallOutcome
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.models.template import GeneratedFile
from dotstrap.core.persistence.artifacts import write_generated

logger = logging.getLogger(__name__)


def shell_path(raw: str) -> str:
    """Spell a ``~/`` path the way a shell rc file expects it."""
    if raw == "~":
        return "$HOME"
    if raw.startswith("~/"):
        return "$HOME/" + raw[2:]
    return raw


def write_artifact(step: str, generated: GeneratedFile, *, dry_run: bool, **metadata) -> Receipt:
    """Write a rendered artifact and describe the outcome as a receipt."""
    if not write_generated(generated, dry_run=dry_run):
        return Receipt.skip(
            step=step,
            reason=f"[dry-run] {generated.path} not written",
            metadata={"path": str(generated.path), "dry_run": True, **metadata},
        )

    logger.info("%s created at %s", generated.reason or "Configuration", generated.path)
    return Receipt.success(
        step=step,
        output=f"Wrote {generated.path}",
        metadata={"path": str(generated.path), **metadata},
    )


def install_receipt(step: str, package: str, outcome: InstallOutcome, **metadata) -> Receipt:
    """Receipt for a step whose only job was one install."""
    metadata = {"package": package, "outcome": outcome.value, **metadata}
    if outcome is InstallOutcome.DRY_RUN:
        return Receipt.skip(step=step, reason=f"[dry-run] would install {package}", metadata=metadata)
    if outcome is InstallOutcome.ALREADY_PRESENT:
        return Receipt.success(step=step, output=f"{package} already installed", metadata=metadata)
    return Receipt.success(step=step, output=f"{package} installed", metadata=metadata)
