"""
Typed options for the generated configuration artifacts.

Each renderer in ``services.templates`` takes exactly one of these,
so rendering never depends on prompts or the filesystem.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Recommended zinit plugins, in menu order.
ZSH_PLUGINS: dict[str, str] = {
    "zsh-syntax-highlighting": "zsh-users/zsh-syntax-highlighting",
    "zsh-autosuggestions": "zsh-users/zsh-autosuggestions",
    "zsh-completions": "zsh-users/zsh-completions",
    "zsh-vim-mode": "jeffreytse/zsh-vim-mode",
}

THEMES: list[str] = ["Gruvbox", "Solarized", "OneDark", "Custom"]

# Background colour per known theme; custom themes get the gruvbox one.
THEME_BACKGROUNDS: dict[str, str] = {
    "gruvbox": "#282828",
    "solarized": "#002b36",
    "onedark": "#282c34",
}
DEFAULT_BACKGROUND = "#282828"

DEFAULT_FONT = "JetBrainsMono Nerd Font Mono"


class TerminalThemeOptions(BaseModel):
    """Inputs for ``~/terminal_config.conf``."""

    theme: str
    prompt_style: str = ""
    font: str = DEFAULT_FONT

    @property
    def background(self) -> str:
        return THEME_BACKGROUNDS.get(self.theme.lower(), DEFAULT_BACKGROUND)


class EditorOptions(BaseModel):
    """Inputs for the Neovim ``init.lua``."""

    theme: str
    plugin_list: list[str] = Field(default_factory=list)
    show_line_numbers: bool = True


class ShellOptions(BaseModel):
    """Inputs for ``~/.zshrc``.

    ``plugin_list`` holds zinit repo slugs (``owner/name``).
    """

    plugin_list: list[str] = Field(default_factory=list)
    prompt_style: str = ""
    zinit_home: str = "$HOME/.zinit"
