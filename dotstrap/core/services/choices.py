"""
Choice providers — where operator decisions come from.

Steps never read the terminal directly.  They ask a ChoiceProvider,
which may prompt a human (PromptChoiceProvider), read answers from the
config file or a test (AnswersChoiceProvider), or chain the two.

Every question has a stable id (the ``Q_*`` constants) so answers can
be supplied ahead of time under ``answers:`` in dotstrap.yml.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

import click

from dotstrap.core.errors import MissingAnswer

logger = logging.getLogger(__name__)

# ── Question ids ────────────────────────────────────────────────

Q_TERMINAL = "terminal"
Q_THEME = "theme"
Q_CUSTOM_THEME = "custom_theme"
Q_PROMPT_STYLE = "prompt_style"
Q_NVIM_THEME = "nvim_theme"
Q_NVIM_PLUGINS = "nvim_plugins"
Q_SHOW_LINE_NUMBERS = "show_line_numbers"
Q_ZSH_PLUGINS = "zsh_plugins"

_YES = {"y", "yes", "true", "1", "on"}
_NO = {"n", "no", "false", "0", "off"}


def parse_selection(raw: str, options: Sequence[str]) -> list[str]:
    """Turn ``"1, 2,4"`` into the matching options.

    Numbers out of range and non-numbers are ignored; duplicates are
    dropped; order follows the input.
    """
    selected: list[str] = []
    for token in raw.split(","):
        token = token.strip()
        if not token.isdigit():
            continue
        index = int(token)
        if 1 <= index <= len(options):
            option = options[index - 1]
            if option not in selected:
                selected.append(option)
    return selected


def parse_bool(raw: str, default: bool = False) -> bool:
    value = raw.strip().lower()
    if value in _YES:
        return True
    if value in _NO:
        return False
    return default


class ChoiceProvider(ABC):
    """Source of operator decisions."""

    @abstractmethod
    def choose(self, key: str, prompt: str, options: Sequence[str]) -> str:
        """Pick exactly one of ``options``."""

    @abstractmethod
    def choose_many(self, key: str, prompt: str, options: Sequence[str]) -> list[str]:
        """Pick any number of ``options`` (possibly none)."""

    @abstractmethod
    def ask(self, key: str, prompt: str, default: str = "") -> str:
        """Free-text answer."""

    def confirm(self, key: str, prompt: str, default: bool = False) -> bool:
        """Yes/no answer."""
        return parse_bool(self.ask(key, prompt, "yes" if default else "no"), default)


class PromptChoiceProvider(ChoiceProvider):
    """Ask a human on the terminal with numbered menus."""

    def choose(self, key: str, prompt: str, options: Sequence[str]) -> str:
        click.echo(prompt)
        for number, option in enumerate(options, start=1):
            click.echo(f" {number}. {option}")
        number = click.prompt(
            "Enter the number corresponding to your choice",
            type=click.IntRange(1, len(options)),
        )
        return options[number - 1]

    def choose_many(self, key: str, prompt: str, options: Sequence[str]) -> list[str]:
        click.echo(prompt)
        for number, option in enumerate(options, start=1):
            click.echo(f" {number}. {option}")
        raw = click.prompt(
            "Enter numbers separated by commas (e.g., 1,2,4)",
            default="",
            show_default=False,
        )
        return parse_selection(raw, options)

    def ask(self, key: str, prompt: str, default: str = "") -> str:
        return click.prompt(prompt, default=default, show_default=bool(default))

    def confirm(self, key: str, prompt: str, default: bool = False) -> bool:
        return click.confirm(prompt, default=default)


class AnswersChoiceProvider(ChoiceProvider):
    """Answer from a mapping of question id → value.

    Values for ``choose`` may be an option name (case-insensitive) or a
    1-based number; ``choose_many`` accepts a list, a single value, or a
    comma-separated string of either.  Questions without an answer go to
    ``fallback``, or raise MissingAnswer when there is none.
    """

    def __init__(
        self,
        answers: Mapping[str, Any],
        fallback: ChoiceProvider | None = None,
    ):
        self._answers = dict(answers)
        self._fallback = fallback

    def _lookup(self, key: str) -> Any:
        return self._answers.get(key)

    def _missing(self, key: str) -> MissingAnswer:
        return MissingAnswer(f"No answer configured for '{key}'")

    def choose(self, key: str, prompt: str, options: Sequence[str]) -> str:
        value = self._lookup(key)
        if value is None:
            if self._fallback is None:
                raise self._missing(key)
            return self._fallback.choose(key, prompt, options)

        option = _match_option(value, options)
        if option is None:
            raise MissingAnswer(
                f"Answer {value!r} for '{key}' is not one of: {', '.join(options)}"
            )
        logger.debug("Answer for %s: %s", key, option)
        return option

    def choose_many(self, key: str, prompt: str, options: Sequence[str]) -> list[str]:
        value = self._lookup(key)
        if value is None:
            if self._fallback is None:
                raise self._missing(key)
            return self._fallback.choose_many(key, prompt, options)

        if isinstance(value, str):
            items = value.split(",")
        elif isinstance(value, (list, tuple, set)):
            items = list(value)
        else:
            items = [value]
        selected: list[str] = []
        for item in items:
            if isinstance(item, str) and not item.strip():
                continue
            option = _match_option(item, options)
            if option is None:
                raise MissingAnswer(
                    f"Answer {item!r} for '{key}' is not one of: {', '.join(options)}"
                )
            if option not in selected:
                selected.append(option)
        return selected

    def ask(self, key: str, prompt: str, default: str = "") -> str:
        value = self._lookup(key)
        if value is None:
            if self._fallback is None:
                return default
            return self._fallback.ask(key, prompt, default)
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return str(value)

    def confirm(self, key: str, prompt: str, default: bool = False) -> bool:
        value = self._lookup(key)
        if value is None and self._fallback is not None:
            return self._fallback.confirm(key, prompt, default)
        if isinstance(value, bool):
            return value
        if value is None:
            return default
        return parse_bool(str(value), default)


def _match_option(value: Any, options: Sequence[str]) -> str | None:
    """Resolve a name or 1-based number against ``options``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return options[value - 1] if 1 <= value <= len(options) else None

    text = str(value).strip()
    if text.isdigit():
        return _match_option(int(text), options)
    for option in options:
        if option.lower() == text.lower():
            return option
    return None
