"""
CLI commands for the package backend.

Thin wrappers over ``dotstrap.core.services.packages``: the same
idempotent installer the bootstrap flow uses, one package at a time.
"""

from __future__ import annotations

import json
import sys

import click


def _installer(ctx: click.Context, dry_run: bool = False):
    """Build the installer for this machine, exiting 1 when unsupported."""
    from dotstrap.core.config.loader import ConfigError, load_config
    from dotstrap.core.errors import UnsupportedPlatform
    from dotstrap.core.services.detection import detect_platform
    from dotstrap.core.services.packages import PackageInstaller, select_backend

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    runner = ctx.obj.get("runner")
    if runner is None:
        from dotstrap.adapters.shell.command import SubprocessRunner

        runner = SubprocessRunner()

    profile = ctx.obj.get("profile")
    if profile is None:
        try:
            profile = detect_platform(which=runner.which)
        except UnsupportedPlatform as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)

    backend = select_backend(profile, runner)
    return PackageInstaller(backend, dry_run=dry_run or config.dry_run)


@click.group()
def packages() -> None:
    """Packages — check, install and list through the detected backend."""


# ── Observe ─────────────────────────────────────────────────────


@packages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--cask", is_flag=True, help="Treat NAMES as Homebrew casks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, names: tuple[str, ...], cask: bool, as_json: bool) -> None:
    """Report whether each package is installed."""
    from dotstrap.core.errors import PackageManagerMissing
    from dotstrap.core.models.package import PackageRequest

    installer = _installer(ctx)
    try:
        result = {
            name: installer.is_installed(PackageRequest(name=name, cask=cask))
            for name in names
        }
    except PackageManagerMissing as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"backend": installer.backend.name, "packages": result}, indent=2))
    else:
        click.secho(f"📦 {installer.backend.name}:", fg="cyan", bold=True)
        for name, present in result.items():
            icon = "✅" if present else "❌"
            click.echo(f"   {icon} {name}")

    if not all(result.values()):
        sys.exit(1)


@packages.command("list")
@click.pass_context
def list_packages(ctx: click.Context) -> None:
    """Print the backend's list of installed packages."""
    from dotstrap.core.errors import DotstrapError

    installer = _installer(ctx)
    try:
        installer.ensure_backend()
        listing = installer.backend.list_installed()
    except DotstrapError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(listing, nl=False)


# ── Act ─────────────────────────────────────────────────────────


@packages.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--cask", is_flag=True, help="Install NAMES as Homebrew casks.")
@click.option("--dry-run", is_flag=True, help="Log the install instead of running it.")
@click.pass_context
def install(ctx: click.Context, names: tuple[str, ...], cask: bool, dry_run: bool) -> None:
    """Install packages that are not already present."""
    from dotstrap.core.errors import DotstrapError
    from dotstrap.core.models.package import PackageRequest

    installer = _installer(ctx, dry_run=dry_run)
    failed = 0
    for name in names:
        try:
            outcome = installer.install(PackageRequest(name=name, cask=cask))
        except DotstrapError as e:
            click.secho(f"❌ {e}", fg="red")
            failed += 1
            continue
        click.secho(f"✅ {name}: {outcome.value}", fg="green")

    if failed:
        sys.exit(1)
