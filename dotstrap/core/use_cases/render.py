"""
Render use case — preview a generated artifact without writing it.

Answers come from the ``answers:`` section of dotstrap.yml only; a
question with no configured answer takes its default, and a menu with
no answer raises MissingAnswer.
"""

from __future__ import annotations

from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.template import GeneratedFile
from dotstrap.core.services.choices import Q_PROMPT_STYLE, AnswersChoiceProvider, ChoiceProvider
from dotstrap.core.services.features.editor import resolve_editor_options
from dotstrap.core.services.features.shell import resolve_shell_options
from dotstrap.core.services.features.terminal import resolve_theme_options
from dotstrap.core.services.templates import (
    render_backup_readme,
    render_nvim_init,
    render_terminal_config,
    render_zshrc,
)

ARTIFACTS = ("terminal", "editor", "shell", "readme")


def render_artifact(
    config: BootstrapConfig,
    artifact: str,
    choices: ChoiceProvider | None = None,
) -> GeneratedFile:
    """Render one artifact as the run would write it.

    Raises:
        ValueError: Unknown artifact name.
        MissingAnswer: A required menu choice is not configured.
    """
    choices = choices if choices is not None else AnswersChoiceProvider(config.answers)

    if artifact == "terminal":
        options = resolve_theme_options(choices)
        return GeneratedFile(
            path=config.path("terminal_config"),
            content=render_terminal_config(options),
        )

    if artifact == "editor":
        return GeneratedFile(
            path=config.path("nvim_init"),
            content=render_nvim_init(resolve_editor_options(choices)),
        )

    if artifact == "shell":
        prompt_style = choices.ask(Q_PROMPT_STYLE, "Select a prompt style").strip()
        options = resolve_shell_options(choices, config, prompt_style=prompt_style)
        return GeneratedFile(
            path=config.path("zshrc"),
            content=render_zshrc(options),
            backup=True,
        )

    if artifact == "readme":
        return GeneratedFile(
            path=config.backup_dir / "README.md",
            content=render_backup_readme(str(config.log_file)),
        )

    raise ValueError(f"Unknown artifact '{artifact}' (expected one of: {', '.join(ARTIFACTS)})")
