"""
Neovim — install if missing, then write a minimal Packer ``init.lua``.
A config next to an already installed Neovim is left alone.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.models.options import EditorOptions
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.models.template import GeneratedFile
from dotstrap.core.services.choices import (
    Q_NVIM_PLUGINS,
    Q_NVIM_THEME,
    Q_SHOW_LINE_NUMBERS,
    ChoiceProvider,
)
from dotstrap.core.services.features.base import write_artifact
from dotstrap.core.services.features.terminal import SELECTED_THEME
from dotstrap.core.services.templates import render_nvim_init, split_plugins

logger = logging.getLogger(__name__)

STEP = "editor"

DEFAULT_NVIM_THEME = "gruvbox"


def resolve_editor_options(
    choices: ChoiceProvider,
    default_theme: str = DEFAULT_NVIM_THEME,
) -> EditorOptions:
    theme = choices.ask(
        Q_NVIM_THEME,
        "Enter preferred nvim theme (e.g., gruvbox, onedark)",
        default=default_theme,
    ).strip() or DEFAULT_NVIM_THEME
    plugins = choices.ask(
        Q_NVIM_PLUGINS,
        "Enter desired plugins (comma separated, e.g., nvim-tree/nvim-tree.lua)",
    )
    show_line_numbers = choices.confirm(Q_SHOW_LINE_NUMBERS, "Show line numbers?", default=True)
    return EditorOptions(
        theme=theme,
        plugin_list=split_plugins(plugins),
        show_line_numbers=show_line_numbers,
    )


def install_nvim_and_configure(ctx: StepContext) -> Receipt:
    """Install Neovim when missing and write ``init.lua``.

    An existing ``init.lua`` is only replaced right after a fresh
    install; with Neovim already present the user's config is kept.
    """
    init_lua = ctx.path("nvim_init")
    outcome = None
    if ctx.runner.has("nvim"):
        logger.info("Neovim is already installed.")
        if init_lua.exists():
            logger.info("Keeping existing Neovim configuration at %s", init_lua)
            return Receipt.success(
                step=STEP,
                output=f"Kept {init_lua}",
                metadata={"path": str(init_lua), "outcome": "already_present"},
            )
    else:
        logger.info("Neovim not found. Installing...")
        outcome = ctx.installer.install("neovim")

    options = resolve_editor_options(
        ctx.choices,
        default_theme=ctx.selections.get(SELECTED_THEME, DEFAULT_NVIM_THEME),
    )
    generated = GeneratedFile(
        path=init_lua,
        content=render_nvim_init(options),
        reason="Neovim configuration",
    )
    return write_artifact(
        STEP,
        generated,
        dry_run=ctx.dry_run,
        outcome=outcome.value if outcome else "already_present",
        plugins=options.plugin_list,
    )
