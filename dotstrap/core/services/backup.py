"""
Backup/publish — mirror the generated configs into a git repository.

Copies the configuration artifacts into the staging directory, writes
its README, commits whatever changed and pushes to the configured
remote.  An unchanged tree is not an error.  A failed push is logged
and reported but does not stop the run; a staging directory that
cannot be created does.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

from dotstrap.adapters.base import CommandRunner
from dotstrap.adapters.vcs.git import GitRepository
from dotstrap.core.engine.executor import StepContext
from dotstrap.core.errors import BackupDirectoryError
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.persistence.artifacts import atomic_write_text
from dotstrap.core.services.templates import render_backup_readme

logger = logging.getLogger(__name__)

STEP = "backup"

REMOTE_NAME = "origin"
README_NAME = "README.md"

# Artifacts mirrored into the staging directory, by ``paths`` key.
BACKED_UP_PATHS = ("terminal_config", "nvim_init", "zshrc")


def backup_sources(config: BootstrapConfig) -> list[Path]:
    """Existing files to mirror: the run config plus generated artifacts."""
    candidates: list[Path] = []
    if config.source_path is not None:
        candidates.append(config.source_path)
    candidates.extend(config.path(key) for key in BACKED_UP_PATHS)
    return [p for p in candidates if p.is_file()]


def commit_message(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%a %b %d %H:%M:%S %Y")
    return f"Backup configs on {stamp}"


def prepare_staging(staging: Path) -> None:
    """Create the staging directory.

    Raises:
        BackupDirectoryError: The directory cannot be created or used.
    """
    try:
        staging.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BackupDirectoryError(f"Failed to change directory to {staging}: {e}") from e
    if not staging.is_dir():
        raise BackupDirectoryError(f"Failed to change directory to {staging}")


def backup_configs(
    config: BootstrapConfig,
    runner: CommandRunner,
    *,
    now: datetime | None = None,
) -> Receipt:
    """Copy, commit and push the configuration backup.

    Raises:
        BackupDirectoryError: Fatal; the staging directory is unusable.
        PushFailure: The push was rejected (non-fatal for the run).
        GitCommandError: init/add/commit failed (non-fatal for the run).
    """
    staging = config.backup_dir
    remote = config.backup.remote
    sources = backup_sources(config)

    logger.info("Backing up configuration files to %s...", remote or staging)

    if config.dry_run:
        for source in sources:
            logger.info("[DRY-RUN] Would copy %s to %s", source, staging)
        logger.info("[DRY-RUN] Would commit and push backup to %s.", remote or "(no remote)")
        return Receipt.skip(
            step=STEP,
            reason="[dry-run] backup not written",
            metadata={"files": [s.name for s in sources], "dry_run": True},
        )

    prepare_staging(staging)

    for source in sources:
        shutil.copy2(source, staging / source.name)
    atomic_write_text(staging / README_NAME, render_backup_readme(str(config.log_file)))

    repo = GitRepository(staging, runner)
    if not repo.is_repo():
        repo.init()
        if remote:
            repo.add_remote(REMOTE_NAME, remote)

    repo.add_all()
    committed = repo.commit(commit_message(now))
    if not committed:
        logger.info("Nothing to commit.")

    metadata = {"files": [s.name for s in sources], "committed": committed, "pushed": False}

    if not remote:
        logger.warning("No backup remote configured; skipping push.")
        return Receipt.success(step=STEP, output="Backup committed locally", metadata=metadata)

    repo.push(REMOTE_NAME, config.backup.branch)
    metadata["pushed"] = True
    logger.info("Backup complete.")
    return Receipt.success(step=STEP, output=f"Backup pushed to {remote}", metadata=metadata)


def backup_step(ctx: StepContext) -> Receipt:
    return backup_configs(ctx.config, ctx.runner)
