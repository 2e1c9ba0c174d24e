"""
Terminal emulator and terminal theme.

The emulator step installs one of a few known emulators only when none
of them is present.  The theme step always asks for a theme and a
prompt style and writes ``terminal_config.conf``; the prompt style is
kept in the step context for the shell step.
"""

from __future__ import annotations

import logging

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.errors import MissingAnswer
from dotstrap.core.models.options import THEMES, TerminalThemeOptions
from dotstrap.core.models.package import PackageRequest
from dotstrap.core.models.receipt import Receipt
from dotstrap.core.models.template import GeneratedFile
from dotstrap.core.services.choices import (
    Q_CUSTOM_THEME,
    Q_PROMPT_STYLE,
    Q_TERMINAL,
    Q_THEME,
    ChoiceProvider,
)
from dotstrap.core.services.detection.presence import find_installed_terminal
from dotstrap.core.services.features.base import install_receipt, write_artifact
from dotstrap.core.services.templates import render_terminal_config

logger = logging.getLogger(__name__)

EMULATOR_STEP = "terminal-emulator"
THEME_STEP = "terminal-theme"

TERMINAL_EMULATORS: list[str] = ["ghostty", "alacritty", "iTerm2", "Hyper"]

CUSTOM_THEME = "Custom"

# Keys stored in StepContext.selections
SELECTED_THEME = "theme"
SELECTED_PROMPT_STYLE = "prompt_style"


def terminal_package(name: str, *, macos: bool) -> PackageRequest:
    """Package request for a terminal emulator; casks on macOS."""
    return PackageRequest(name=name.lower(), cask=macos)


def check_terminal_emulator(ctx: StepContext) -> Receipt:
    found = find_installed_terminal(
        TERMINAL_EMULATORS,
        ctx.runner,
        ctx.path("applications"),
    )
    if found:
        logger.info("%s is already installed. Skipping terminal installation.", found)
        return Receipt.success(
            step=EMULATOR_STEP,
            output=f"{found} already installed",
            metadata={"terminal": found},
        )

    logger.info("No known terminal emulator found. Please choose one to install:")
    choice = ctx.choices.choose(Q_TERMINAL, "Select a terminal emulator:", TERMINAL_EMULATORS)
    logger.info("User selected %s. Installing...", choice)

    request = terminal_package(choice, macos=ctx.profile.is_macos)
    outcome = ctx.installer.install(request)
    return install_receipt(EMULATOR_STEP, request.name, outcome, terminal=choice)


def resolve_theme_options(choices: ChoiceProvider) -> TerminalThemeOptions:
    """Ask for the terminal theme and prompt style."""
    choice = choices.choose(Q_THEME, "Select a terminal theme:", THEMES)
    if choice == CUSTOM_THEME:
        theme = choices.ask(Q_CUSTOM_THEME, "Enter custom theme name").strip()
        if not theme:
            raise MissingAnswer("A custom theme needs a name")
    else:
        theme = choice.lower()

    prompt_style = choices.ask(
        Q_PROMPT_STYLE,
        "Select a prompt style (e.g., powerlevel10k, oh-my-zsh)",
    ).strip()
    return TerminalThemeOptions(theme=theme, prompt_style=prompt_style)


def setup_terminal_theme(ctx: StepContext) -> Receipt:
    options = resolve_theme_options(ctx.choices)
    ctx.selections[SELECTED_THEME] = options.theme
    ctx.selections[SELECTED_PROMPT_STYLE] = options.prompt_style

    generated = GeneratedFile(
        path=ctx.path("terminal_config"),
        content=render_terminal_config(options),
        reason="Terminal configuration",
    )
    return write_artifact(
        THEME_STEP,
        generated,
        dry_run=ctx.dry_run,
        theme=options.theme,
        prompt_style=options.prompt_style,
    )
