"""
Templates — render the generated configuration artifacts.

Pure functions: typed options in, file text out.  Nothing here touches
the filesystem, prompts, or the clock, so the same options always
render byte-identical text.
"""

from __future__ import annotations

from dotstrap.core.models.options import EditorOptions, ShellOptions, TerminalThemeOptions

# ── Terminal theme config ───────────────────────────────────────

_TERMINAL_CONFIG = """\
# Minimal Terminal Configuration
# Theme: {theme}
# Prompt Style: {prompt_style}

# Set custom background, font, and colors based on {theme}
BACKGROUND_COLOR="{background}"
FONT="{font}"
TERM_THEME="{quoted_theme}"

# Function to switch themes dynamically:
switch_theme() {{
    echo "Switching theme to $1..."
    TERM_THEME="$1"
}}
"""


def _sh_double(value: str) -> str:
    """Escape ``value`` for a double-quoted shell string."""
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, "\\" + char)
    return value


def _comment(value: str) -> str:
    return " ".join(value.splitlines())


def render_terminal_config(options: TerminalThemeOptions) -> str:
    """Render ``terminal_config.conf``."""
    return _TERMINAL_CONFIG.format(
        theme=_comment(options.theme),
        prompt_style=_comment(options.prompt_style),
        quoted_theme=_sh_double(_comment(options.theme)),
        background=_sh_double(options.background),
        font=_sh_double(options.font),
    )


# ── Neovim init.lua ─────────────────────────────────────────────

_PACKER = "wbthomason/packer.nvim"


def _lua_single(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _lua_double(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def split_plugins(raw: str) -> list[str]:
    """Split a comma-separated plugin list, dropping blanks."""
    return [p.strip() for p in raw.split(",") if p.strip()]


def render_nvim_init(options: EditorOptions) -> str:
    """Render a minimal Packer-based ``init.lua``."""
    lines = [
        "-- Minimal Neovim configuration",
        f"vim.o.number = {'true' if options.show_line_numbers else 'false'}",
        f'vim.cmd("colorscheme {_lua_double(options.theme)}")',
        "",
        "-- Bootstrap Packer",
        "vim.cmd [[packadd packer.nvim]]",
        "require('packer').startup(function(use)",
        f"  use '{_PACKER}'",
        "  -- Additional plugins:",
    ]
    for plugin in options.plugin_list:
        plugin = plugin.strip()
        if plugin and plugin != _PACKER:
            lines.append(f"  use '{_lua_single(plugin)}'")
    lines.append("end)")
    return "\n".join(lines) + "\n"


# ── zshrc ───────────────────────────────────────────────────────

_P10K_BLOCK = "[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh"

_OH_MY_ZSH_BLOCK = """\
export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="robbyrussell"
source $ZSH/oh-my-zsh.sh"""


def prompt_block(prompt_style: str) -> str | None:
    """The prompt framework snippet for a prompt style, if any."""
    style = prompt_style.lower()
    if "powerlevel10k" in style:
        return _P10K_BLOCK
    if "oh-my-zsh" in style:
        return _OH_MY_ZSH_BLOCK
    return None


def render_zshrc(options: ShellOptions) -> str:
    """Render ``.zshrc`` loading zinit, the chosen plugins and prompt."""
    lines = [
        "# Basic zsh configuration",
        f'export ZINIT_HOME="{options.zinit_home}"',
        'source "$ZINIT_HOME/zinit.git/zinit.zsh"',
    ]
    lines.extend(f"zinit light {plugin}" for plugin in options.plugin_list)

    block = prompt_block(options.prompt_style)
    if block:
        lines.append(block)
    return "\n".join(lines) + "\n"


# ── Backup repository README ────────────────────────────────────

_BACKUP_README = """\
# System Maintenance & Configurations Backup

This repository contains the following configuration files:
- **dotstrap.yml:** The configuration the bootstrap run was driven by.
- **terminal_config.conf:** Minimal configuration for terminal themes and dynamic switching.
- **init.lua:** Minimal Neovim configuration using Packer with custom themes, plugins, and settings.
- **.zshrc:** zsh configuration with plugins installed via zinit.

## How to Use
- Run `dotstrap run` on your system. It auto-detects your OS and installs/configures required packages.
- Logs are stored in `{log_file}`.

## Backup Process
- This repository is updated each time dotstrap runs to back up your configurations.
"""


def render_backup_readme(log_file: str = "~/LOGS/script.log") -> str:
    """Render the README committed alongside the backed-up configs."""
    return _BACKUP_README.format(log_file=log_file)
