"""
CLI commands for the configuration backup.

Thin wrappers over ``dotstrap.core.services.backup``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def backup() -> None:
    """Backup — mirror generated configs into a git repository."""


@backup.command()
@click.option("--remote", default=None, help="Remote URL (default: backup.remote from config).")
@click.option("--dry-run", is_flag=True, help="Log what would be copied and pushed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def push(ctx: click.Context, remote: str | None, dry_run: bool, as_json: bool) -> None:
    """Copy the configs into the backup repository, commit and push.

    Examples:

        dotstrap backup push

        dotstrap backup push --remote git@github.com:me/configs.git
    """
    from dotstrap.core.config.loader import ConfigError, load_config
    from dotstrap.core.errors import DotstrapError
    from dotstrap.core.services.backup import backup_configs

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    update: dict = {}
    if dry_run:
        update["dry_run"] = True
    if remote is not None:
        update["backup"] = config.backup.model_copy(update={"remote": remote})
    if update:
        config = config.model_copy(update=update)

    runner = ctx.obj.get("runner")
    if runner is None:
        from dotstrap.adapters.shell.command import SubprocessRunner

        runner = SubprocessRunner()

    try:
        receipt = backup_configs(config, runner)
    except DotstrapError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(receipt.model_dump(mode="json"), indent=2))
        return

    if receipt.status == "skipped":
        click.secho(f"⊘ {receipt.output}", fg="yellow")
        return

    click.secho(f"✅ {receipt.output}", fg="green", bold=True)
    for name in receipt.metadata.get("files", []):
        click.echo(f"   • {name}")
    if not receipt.metadata.get("committed"):
        click.echo("   Nothing to commit.")
