"""
Run use case — the full bootstrap flow.

This is the top-level orchestrator: it detects the platform, selects the
package backend, runs every feature step once in order, then backs up
and tidies up.  Each real run appends one summary line to the run ledger,
including runs aborted by a fatal error; dry-runs leave it untouched.
"""

from __future__ import annotations

import logging
import time

from dotstrap.adapters.base import CommandRunner
from dotstrap.core.engine.executor import (
    RunReport,
    Step,
    StepContext,
    execute_steps,
    generate_operation_id,
)
from dotstrap.core.errors import FatalError
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.platform import PlatformProfile
from dotstrap.core.persistence.ledger import LedgerEntry, RunLedger
from dotstrap.core.services.choices import (
    AnswersChoiceProvider,
    ChoiceProvider,
    PromptChoiceProvider,
)
from dotstrap.core.services.detection import detect_platform
from dotstrap.core.services.packages import PackageInstaller, select_backend

logger = logging.getLogger(__name__)


def build_steps() -> list[Step]:
    """The ordered steps of a full run."""
    from dotstrap.core.services.features import BOOTSTRAP_STEPS

    return list(BOOTSTRAP_STEPS)


def default_choices(config: BootstrapConfig) -> ChoiceProvider:
    """Configured answers first, interactive prompts for the rest."""
    return AnswersChoiceProvider(config.answers, fallback=PromptChoiceProvider())


def build_context(
    config: BootstrapConfig,
    profile: PlatformProfile,
    runner: CommandRunner,
    choices: ChoiceProvider | None = None,
    use_sudo: bool | None = None,
) -> StepContext:
    backend = select_backend(profile, runner, use_sudo=use_sudo)
    return StepContext(
        profile=profile,
        config=config,
        runner=runner,
        installer=PackageInstaller(backend, dry_run=config.dry_run),
        choices=choices if choices is not None else default_choices(config),
    )


def run_bootstrap(
    config: BootstrapConfig,
    *,
    profile: PlatformProfile | None = None,
    runner: CommandRunner | None = None,
    choices: ChoiceProvider | None = None,
    steps: list[Step] | None = None,
    use_sudo: bool | None = None,
) -> RunReport:
    """Execute the bootstrap flow.

    Args:
        config: Frozen run configuration.
        profile: Platform profile (default: detect the running one).
        runner: Command runner (default: real subprocesses).
        choices: Choice provider (default: configured answers, then prompts).
        steps: Steps to run (default: the full flow).
        use_sudo: Prefix privileged commands with sudo (default: unless root).

    Returns:
        RunReport with one receipt per step.

    Raises:
        FatalError: Unsupported platform or unusable backup directory.
    """
    operation_id = generate_operation_id()
    ledger = RunLedger(config.ledger_file)
    start = time.monotonic()

    mode = "[DRY-RUN] " if config.dry_run else ""
    logger.info("%sStarting bootstrap run %s", mode, operation_id)

    if runner is None:
        from dotstrap.adapters.shell.command import SubprocessRunner

        runner = SubprocessRunner()

    try:
        if profile is None:
            profile = detect_platform(which=runner.which)
        logger.info("%s", profile.describe())

        ctx = build_context(config, profile, runner, choices=choices, use_sudo=use_sudo)
        report = execute_steps(
            steps if steps is not None else build_steps(),
            ctx,
            operation_id=operation_id,
        )
    except FatalError as e:
        logger.error("%s", e)
        if not config.dry_run:
            ledger.write(
                LedgerEntry.for_abort(
                    operation_id,
                    e,
                    platform=profile.describe() if profile else "",
                    dry_run=False,
                    duration_ms=_elapsed_ms(start),
                )
            )
        raise

    if config.dry_run:
        logger.info("[DRY-RUN] Would record run %s in %s", operation_id, ledger.path)
    else:
        ledger.write(
            LedgerEntry.for_report(report, platform=profile.describe(), duration_ms=_elapsed_ms(start))
        )

    logger.info("Setup completed. Check %s for details.", config.log_file)
    return report


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
