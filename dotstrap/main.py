"""
dotstrap — CLI entrypoint.

Usage:
    dotstrap --help
    dotstrap run
    DRY_RUN=true dotstrap run
    dotstrap detect --json
"""

from __future__ import annotations

import json
import signal
import sys
from pathlib import Path

import click

from dotstrap import __version__
from dotstrap.core.observability.logging_config import resolve_level, setup_logging

INTERRUPTED_MESSAGE = "Script interrupted or an error occurred. Exiting."


def _load_config(ctx: click.Context, dry_run: bool = False):
    """Load dotstrap.yml (or defaults), exiting 1 on a config error."""
    from dotstrap.core.config.loader import ConfigError, load_config

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if dry_run and not config.dry_run:
        config = config.model_copy(update={"dry_run": True})
    return config


def _interrupted(signum, frame) -> None:
    click.echo(INTERRUPTED_MESSAGE, err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="dotstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors to the console.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to dotstrap.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """dotstrap — bootstrap a macOS or Linux workstation."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # Console only; ``run`` adds the installation log.
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    ctx.obj["log_level"] = level
    setup_logging(level=level)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Log every change instead of making it.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, dry_run: bool, as_json: bool) -> None:
    """Run the full bootstrap flow.

    Dry-run can also be enabled with the DRY_RUN environment variable.

    Examples:

        dotstrap run

        DRY_RUN=true dotstrap run
    """
    from dotstrap.core.errors import FatalError
    from dotstrap.core.use_cases.run import run_bootstrap

    config = _load_config(ctx, dry_run=dry_run)

    setup_logging(level=ctx.obj["log_level"], log_file=config.log_file)

    previous = {sig: signal.signal(sig, _interrupted) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        report = run_bootstrap(
            config,
            profile=ctx.obj.get("profile"),
            runner=ctx.obj.get("runner"),
            choices=ctx.obj.get("choices"),
        )
    except FatalError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif not ctx.obj.get("quiet"):
        _print_report(report, config.log_file, verbose=ctx.obj.get("verbose", False))


# Marker and colour per receipt status, and per overall run status.
_RECEIPT_STYLE = {"ok": ("✓", "green"), "failed": ("✗", "red"), "skipped": ("⊘", "yellow")}
_RUN_COLOUR = {"ok": "green", "partial": "yellow", "failed": "red"}


def _print_report(report, log_file: Path, verbose: bool) -> None:
    mode = "[dry-run] " if report.dry_run else ""
    click.secho(f"\n⚡ {mode}bootstrap {report.operation_id}\n", fg="cyan", bold=True)

    for receipt in report.receipts:
        marker, colour = _RECEIPT_STYLE[receipt.status]
        click.secho(f"   {marker} {receipt.step}", fg=colour, nl=False)
        if receipt.status == "skipped":
            click.echo(f" ({receipt.output})")
            continue
        click.echo(f" ({receipt.duration_ms}ms)" if receipt.duration_ms else "")

        details = receipt.error if receipt.failed else (receipt.output if verbose else "")
        for line in (details or "").splitlines()[:5]:
            click.echo(f"     │ {line}")

    click.secho(
        f"\n   Result: {report.succeeded}/{report.total} succeeded, "
        f"{report.failed} failed, {report.skipped} skipped",
        fg=_RUN_COLOUR.get(report.status, "white"),
        bold=True,
    )
    click.echo(f"   Log: {log_file}\n")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Detect the platform and which managed tools are present."""
    from dotstrap.core.use_cases.detect import run_detect

    config = _load_config(ctx)
    result = run_detect(config, runner=ctx.obj.get("runner"), system=ctx.obj.get("system"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    profile = result.profile
    assert profile is not None

    click.secho(f"\n🔍 {profile.describe()}", fg="cyan", bold=True)
    pm_icon = "✅" if result.backend_available else "❌"
    click.echo(f"   {pm_icon} {profile.package_manager.value}")
    click.echo(f"   Terminal: {result.terminal or '(none found)'}")
    click.echo()

    click.secho("   Tools:", fg="white", bold=True)
    for name, present in result.tools.items():
        click.echo(f"     {'✓' if present else '✗'} {name}")

    click.secho("   Files:", fg="white", bold=True)
    for name, present in result.files.items():
        click.echo(f"     {'✓' if present else '✗'} {name}")
    click.echo()


@cli.command()
@click.argument("artifact", type=click.Choice(["terminal", "editor", "shell", "readme"]))
@click.pass_context
def render(ctx: click.Context, artifact: str) -> None:
    """Print a generated config from the configured answers.

    Nothing is written. ARTIFACT is one of terminal, editor, shell, readme.
    """
    from dotstrap.core.errors import MissingAnswer
    from dotstrap.core.use_cases.render import render_artifact

    config = _load_config(ctx)
    try:
        generated = render_artifact(config, artifact)
    except MissingAnswer as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(generated.content, nl=False)


@cli.command()
@click.option("--days", type=int, default=None, help="Age threshold in days (default: from config).")
@click.option("--dry-run", is_flag=True, help="List files instead of deleting them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cleanup(ctx: click.Context, days: int | None, dry_run: bool, as_json: bool) -> None:
    """Delete old files from the downloads directory."""
    from dotstrap.core.services.housekeeping import clear_old_files

    config = _load_config(ctx, dry_run=dry_run)
    max_age = days if days is not None else config.housekeeping.max_age_days
    directory = config.path("downloads")

    files = clear_old_files(directory, max_age, dry_run=config.dry_run)

    if as_json:
        click.echo(json.dumps({
            "directory": str(directory),
            "dry_run": config.dry_run,
            "files": [str(f) for f in files],
        }, indent=2))
        return

    verb = "Would remove" if config.dry_run else "Removed"
    click.secho(f"🧹 {verb} {len(files)} file(s) from {directory}", fg="green")
    for f in files:
        click.echo(f"   • {f}")


# ── Register command groups ─────────────────────────────────────

from dotstrap.ui.cli.backup import backup  # noqa: E402
from dotstrap.ui.cli.packages import packages  # noqa: E402

cli.add_command(packages)
cli.add_command(backup)


if __name__ == "__main__":
    cli()
