"""
Mock runner — universal test double for external commands.

Records every command it is asked to run and answers from a table of
canned responses keyed by argv prefix.  Anything without a canned
response succeeds with empty output.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from dotstrap.adapters.base import CommandResult, CommandRunner

Effect = Callable[[list[str]], None]


def _tokens(prefix: Sequence[str] | str) -> tuple[str, ...]:
    if isinstance(prefix, str):
        return tuple(prefix.split())
    return tuple(prefix)


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    By default, every command succeeds and every binary in ``binaries``
    is reported as present on PATH.
    """

    def __init__(self, binaries: Iterable[str] = ()):
        self._binaries: set[str] = set(binaries)
        self._responses: dict[tuple[str, ...], CommandResult] = {}
        self._effects: dict[tuple[str, ...], Effect] = {}
        self._call_log: list[list[str]] = []

    @property
    def call_log(self) -> list[list[str]]:
        """Every argv this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def add_binary(self, *names: str) -> None:
        self._binaries.update(names)

    def remove_binary(self, *names: str) -> None:
        self._binaries.difference_update(names)

    def set_response(
        self,
        prefix: Sequence[str] | str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Answer commands starting with ``prefix`` with a fixed result."""
        key = _tokens(prefix)
        self._responses[key] = CommandResult(
            argv=list(key), returncode=returncode, stdout=stdout, stderr=stderr,
        )

    def set_failure(self, prefix: Sequence[str] | str, error: str = "Mock failure") -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self.set_response(prefix, returncode=1, stderr=error)

    def set_effect(self, prefix: Sequence[str] | str, effect: Effect) -> None:
        """Run ``effect(argv)`` whenever a matching command is executed."""
        self._effects[_tokens(prefix)] = effect

    def calls_matching(self, prefix: Sequence[str] | str) -> list[list[str]]:
        """All recorded commands starting with ``prefix``."""
        key = _tokens(prefix)
        return [argv for argv in self._call_log if tuple(argv[: len(key)]) == key]

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: str | None = None,
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = list(argv)
        self._call_log.append(args)

        effect = self._longest_match(self._effects, args)
        if effect is not None:
            effect(args)

        canned = self._longest_match(self._responses, args)
        if canned is not None:
            return canned.model_copy(update={"argv": args})

        return CommandResult(argv=args)

    def which(self, name: str) -> str | None:
        if name in self._binaries:
            return f"/usr/bin/{name}"
        return None

    def reset(self) -> None:
        """Clear the call log and canned responses."""
        self._call_log.clear()
        self._responses.clear()
        self._effects.clear()

    @staticmethod
    def _longest_match(table: dict, args: list[str]):
        best = None
        best_len = -1
        for key, value in table.items():
            if len(key) > best_len and tuple(args[: len(key)]) == key:
                best, best_len = value, len(key)
        return best
