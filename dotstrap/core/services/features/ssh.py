"""
git and the SSH key used for GitHub.

Only prepares local material: the key is generated once, printed with
instructions, and never registered anywhere by dotstrap itself.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from dotstrap.adapters.base import CommandRunner
from dotstrap.core.engine.executor import StepContext
from dotstrap.core.errors import DotstrapError
from dotstrap.core.models.config import SshConfig
from dotstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

STEP = "git-ssh"

GITHUB_KEYS_URL = "https://github.com/settings/keys"


class KeyGenerationError(DotstrapError):
    """ssh-keygen failed."""


def public_key_path(key: Path) -> Path:
    return key.with_name(key.name + ".pub")


def keygen_command(key: Path, ssh: SshConfig) -> list[str]:
    """Non-interactive ssh-keygen with an empty passphrase."""
    return [
        "ssh-keygen",
        "-t", ssh.key_type,
        "-b", str(ssh.bits),
        "-C", ssh.email,
        "-f", str(key),
        "-N", "",
    ]


def ensure_ssh_key(
    key: Path,
    ssh: SshConfig,
    runner: CommandRunner,
    *,
    dry_run: bool = False,
) -> bool:
    """Generate an SSH key pair unless the public key already exists.

    Returns:
        True if a key was generated.

    Raises:
        KeyGenerationError: ssh-keygen exited non-zero.
    """
    if public_key_path(key).is_file():
        logger.info("SSH key already exists.")
        return False

    logger.info("No SSH key found. Generating a new SSH key for GitHub...")
    if dry_run:
        logger.info("[DRY-RUN] Would generate an SSH key.")
        return False

    key.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    result = runner.run(keygen_command(key, ssh))
    if not result.ok:
        raise KeyGenerationError(f"ssh-keygen failed: {result.error}")

    logger.info("SSH key generated. Please add the following key to GitHub:")
    try:
        click.echo(public_key_path(key).read_text(encoding="utf-8").rstrip())
    except OSError:
        logger.error("Could not display SSH key.")
    click.echo(f"Visit: {GITHUB_KEYS_URL}")
    return True


def check_git_and_ssh_key(ctx: StepContext) -> Receipt:
    if ctx.runner.has("git"):
        logger.info("git is already installed.")
    else:
        logger.info("git not found. Installing...")
        ctx.installer.install("git")

    key = ctx.config.ssh_key
    generated = ensure_ssh_key(key, ctx.config.ssh, ctx.runner, dry_run=ctx.dry_run)

    if generated:
        return Receipt.success(step=STEP, output=f"Generated {key}", metadata={"generated": True})
    if public_key_path(key).is_file():
        return Receipt.success(step=STEP, output="SSH key present", metadata={"generated": False})
    return Receipt.skip(step=STEP, reason="[dry-run] SSH key not generated")
