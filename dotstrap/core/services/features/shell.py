"""
zsh with zinit.

Installs zsh when missing, bootstraps zinit once, asks which of the
recommended plugins to load and rewrites ``~/.zshrc``.  The previous
``.zshrc`` is kept as a single ``.zshrc.bak``.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.options import ZSH_PLUGINS, ShellOptions
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.models.template import GeneratedFile
from dotstrap.core.services.choices import Q_ZSH_PLUGINS, ChoiceProvider
from dotstrap.core.services.features.base import shell_path, write_artifact
from dotstrap.core.services.features.terminal import SELECTED_PROMPT_STYLE
from dotstrap.core.services.templates import render_zshrc

logger = logging.getLogger(__name__)

STEP = "shell"

ZINIT_INSTALL_URL = "https://raw.githubusercontent.com/zdharma-continuum/zinit/HEAD/doc/install.sh"


def zinit_install_command() -> list[str]:
    return ["sh", "-c", f'sh -c "$(curl -fsSL {ZINIT_INSTALL_URL})"']


def ensure_zinit(ctx: StepContext) -> bool:
    """Bootstrap zinit unless its home directory already exists.

    Returns:
        True if zinit is (now) present. A failed bootstrap is logged and
        reported as False; the rc file is still written.
    """
    if ctx.path("zinit_home").is_dir():
        return True

    logger.info("Installing zinit...")
    if ctx.dry_run:
        logger.info("[DRY-RUN] Would install zinit.")
        return False

    result = ctx.runner.run(zinit_install_command(), capture=False)
    if not result.ok:
        logger.error("zinit installation failed: %s", result.error)
        return False
    return True


def resolve_shell_options(
    choices: ChoiceProvider,
    config: BootstrapConfig,
    prompt_style: str = "",
) -> ShellOptions:
    """Ask which recommended plugins to load."""
    selected = choices.choose_many(Q_ZSH_PLUGINS, "Recommended zsh plugins:", list(ZSH_PLUGINS))
    return ShellOptions(
        plugin_list=[ZSH_PLUGINS[name] for name in selected],
        prompt_style=prompt_style,
        zinit_home=shell_path(config.paths.zinit_home),
    )


def install_and_configure_zsh(ctx: StepContext) -> Receipt:
    if ctx.runner.has("zsh"):
        logger.info("zsh is already installed.")
    else:
        logger.info("zsh not found. Installing...")
        ctx.installer.install("zsh")

    zinit_ready = ensure_zinit(ctx)

    options = resolve_shell_options(
        ctx.choices,
        ctx.config,
        prompt_style=ctx.selections.get(SELECTED_PROMPT_STYLE, ""),
    )

    generated = GeneratedFile(
        path=ctx.path("zshrc"),
        content=render_zshrc(options),
        backup=True,
        reason="zsh configuration",
    )
    return write_artifact(
        STEP,
        generated,
        dry_run=ctx.dry_run,
        plugins=options.plugin_list,
        zinit=zinit_ready,
    )
