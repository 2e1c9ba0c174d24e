"""
Tests for CLI commands — run, detect, render, cleanup, packages, backup.
"""

import json
import os
import signal
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from dotstrap.adapters.mock import MockRunner
from dotstrap.core.services.choices import AnswersChoiceProvider
from dotstrap.main import INTERRUPTED_MESSAGE, _interrupted, cli


@pytest.fixture(autouse=True)
def _no_dry_run_env(monkeypatch):
    monkeypatch.delenv("DRY_RUN", raising=False)
    monkeypatch.delenv("DOTSTRAP_LOG_LEVEL", raising=False)


def _write_config(tmp_path: Path, home: Path, answers: dict | None = None, **extra) -> Path:
    data = {
        "home": str(home),
        "paths": {
            "applications": str(home / "Applications"),
            "linux_font": str(home / "fonts" / "JetBrainsMonoNL-Regular.ttf"),
        },
        "answers": answers or {},
        **extra,
    }
    path = tmp_path / "dotstrap.yml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "bootstrap a macOS or Linux workstation" in result.output
        for command in ("run", "detect", "render", "cleanup", "packages", "backup"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_config(self, tmp_path: Path):
        path = tmp_path / "dotstrap.yml"
        path.write_text("- just\n- a list\n")
        result = CliRunner().invoke(cli, ["--config", str(path), "detect"])
        assert result.exit_code == 1
        assert "Expected a YAML mapping" in result.output

    def test_missing_explicit_config(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "render", "readme"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestRunCommand:
    @pytest.fixture(autouse=True)
    def _profile(self, ubuntu):
        self.profile = ubuntu

    def _obj(self, answers: dict, runner: MockRunner | None = None) -> dict:
        return {
            "runner": runner or MockRunner(binaries=["apt-get"]),
            "profile": self.profile,
            "choices": AnswersChoiceProvider(answers),
        }

    def test_dry_run_json(self, tmp_path: Path, home: Path, answers: dict):
        config = _write_config(tmp_path, home, answers)
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "run", "--dry-run", "--json"],
            obj=self._obj(answers),
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["dry_run"] is True
        assert data["failed"] == 0
        assert data["total"] == 11
        assert not (home / ".zshrc").exists()

    def test_dry_run_from_environment(self, tmp_path: Path, home: Path, answers: dict, monkeypatch):
        monkeypatch.setenv("DRY_RUN", "true")
        config = _write_config(tmp_path, home, answers)
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "run", "--json"],
            obj=self._obj(answers),
        )
        assert json.loads(result.output)["dry_run"] is True

    def test_summary_and_log_file(self, tmp_path: Path, home: Path, answers: dict):
        config = _write_config(tmp_path, home, answers)
        result = CliRunner().invoke(
            cli,
            ["--config", str(config), "run", "--dry-run"],
            obj=self._obj(answers),
        )
        assert result.exit_code == 0, result.output
        assert "Result: " in result.output
        assert "0 failed" in result.output
        log_file = home / "LOGS" / "script.log"
        assert f"Log: {log_file}" in result.output
        assert "Starting bootstrap run" in log_file.read_text()

    def test_fatal_error_exits_1(self, tmp_path: Path, home: Path, answers: dict):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        config = _write_config(
            tmp_path, home, answers, backup={"directory": str(blocker / "staging")}
        )
        runner = MockRunner(binaries=["apt-get", "zsh", "nvim", "git"])
        result = CliRunner().invoke(
            cli, ["-q", "--config", str(config), "run"], obj=self._obj(answers, runner)
        )
        assert result.exit_code == 1
        assert "staging" in result.output


class TestDetectCommand:
    def test_json(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        (home / ".zshrc").write_text("")
        runner = MockRunner(binaries=["brew", "git"])
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "detect", "--json"],
            obj={"runner": runner, "system": "Darwin"},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["os"] == "macos"
        assert data["package_manager"] == "brew"
        assert data["package_manager_available"] is True
        assert data["terminal"] is None
        assert data["tools"] == {"git": True, "zsh": False, "nvim": False, "curl": False}
        assert data["files"]["zshrc"] is True
        assert data["files"]["ssh_key"] is False

    def test_human_output(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        runner = MockRunner(binaries=["brew", "alacritty"])
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "detect"],
            obj={"runner": runner, "system": "Darwin"},
        )
        assert result.exit_code == 0
        assert "OS: macos, Package Manager: brew" in result.output
        assert "Terminal: alacritty" in result.output

    def test_unsupported(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "detect", "--json"],
            obj={"runner": MockRunner(), "system": "Plan9"},
        )
        assert result.exit_code == 1
        assert json.loads(result.output) == {"error": "Unsupported OS: Plan9"}


class TestRenderCommand:
    def test_terminal(self, tmp_path: Path, home: Path, answers: dict):
        config = _write_config(tmp_path, home, answers)
        result = CliRunner().invoke(cli, ["-q", "--config", str(config), "render", "terminal"])
        assert result.exit_code == 0, result.output
        assert 'TERM_THEME="gruvbox"' in result.output
        assert not (home / "terminal_config.conf").exists()

    def test_shell(self, tmp_path: Path, home: Path, answers: dict):
        config = _write_config(tmp_path, home, answers)
        result = CliRunner().invoke(cli, ["-q", "--config", str(config), "render", "shell"])
        assert result.exit_code == 0, result.output
        assert 'export ZINIT_HOME="$HOME/.zinit"' in result.output
        assert "zinit light zsh-users/zsh-syntax-highlighting" in result.output
        assert "zinit light zsh-users/zsh-autosuggestions" in result.output
        assert "source ~/.p10k.zsh" in result.output

    def test_menu_without_answer(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        result = CliRunner().invoke(cli, ["-q", "--config", str(config), "render", "shell"])
        assert result.exit_code == 1
        assert "zsh_plugins" in result.output

    def test_unknown_artifact(self):
        result = CliRunner().invoke(cli, ["render", "vimrc"])
        assert result.exit_code == 2


class TestCleanupCommand:
    def _old_download(self, home: Path) -> Path:
        old = home / "Downloads" / "installer.dmg"
        old.parent.mkdir(parents=True)
        old.write_text("")
        os.utime(old, (0, 0))
        return old

    def test_dry_run(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        old = self._old_download(home)
        result = CliRunner().invoke(cli, ["-q", "--config", str(config), "cleanup", "--dry-run"])
        assert result.exit_code == 0
        assert "Would remove 1 file(s)" in result.output
        assert old.exists()

    def test_removes(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        old = self._old_download(home)
        result = CliRunner().invoke(cli, ["-q", "--config", str(config), "cleanup", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["files"] == [str(old)]
        assert data["dry_run"] is False
        assert not old.exists()


class TestPackagesCommand:
    @pytest.fixture(autouse=True)
    def _profile(self, macos):
        self.profile = macos

    def _invoke(self, tmp_path: Path, home: Path, runner: MockRunner, *args: str):
        config = _write_config(tmp_path, home)
        return CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "packages", *args],
            obj={"runner": runner, "profile": self.profile},
        )

    def test_check_installed(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        result = self._invoke(tmp_path, home, runner, "check", "git", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == {"backend": "brew", "packages": {"git": True}}

    def test_check_missing_exits_1(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        result = self._invoke(tmp_path, home, runner, "check", "wget")
        assert result.exit_code == 1
        assert "❌ wget" in result.output

    def test_check_without_backend(self, tmp_path: Path, home: Path):
        result = self._invoke(tmp_path, home, MockRunner(), "check", "git")
        assert result.exit_code == 1

    def test_list(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        runner.set_response("brew list", stdout="git\nwget\n")
        result = self._invoke(tmp_path, home, runner, "list")
        assert result.exit_code == 0
        assert result.output == "git\nwget\n"

    def test_install(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        result = self._invoke(tmp_path, home, runner, "install", "wget")
        assert result.exit_code == 0, result.output
        assert "wget: installed" in result.output
        assert ["brew", "install", "wget"] in runner.call_log

    def test_install_dry_run(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        result = self._invoke(tmp_path, home, runner, "install", "wget", "--dry-run")
        assert result.exit_code == 0
        assert "wget: dry_run" in result.output
        assert runner.calls_matching("brew install") == []

    def test_install_failure_exits_1(self, tmp_path: Path, home: Path):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        runner.set_failure("brew install", error="No available formula")
        result = self._invoke(tmp_path, home, runner, "install", "wget")
        assert result.exit_code == 1
        assert "No available formula" in result.output


class TestBackupCommand:
    def test_dry_run(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        runner = MockRunner()
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "backup", "push", "--dry-run"],
            obj={"runner": runner},
        )
        assert result.exit_code == 0
        assert runner.call_log == []
        assert not (home / "config_backup").exists()

    def test_push_with_remote(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        runner = MockRunner()
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "backup", "push", "--remote", "git@example.com:me/c.git"],
            obj={"runner": runner},
        )
        assert result.exit_code == 0, result.output
        assert "dotstrap.yml" in result.output
        assert "Nothing to commit." in result.output
        assert runner.call_log[-1] == ["git", "push", "-u", "origin", "master"]

    def test_push_failure_exits_1(self, tmp_path: Path, home: Path):
        config = _write_config(tmp_path, home)
        runner = MockRunner()
        runner.set_failure("git push", error="Permission denied (publickey)")
        result = CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "backup", "push", "--remote", "x", "--json"],
            obj={"runner": runner},
        )
        assert result.exit_code == 1
        assert "Please check your remote repository settings" in json.loads(result.output)["error"]


class TestInterrupt:
    def test_handler_prints_message_and_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc:
            _interrupted(signal.SIGINT, None)
        assert exc.value.code == 1
        assert INTERRUPTED_MESSAGE in capsys.readouterr().err

    def test_handlers_restored_after_run(self, tmp_path: Path, home: Path, answers: dict, ubuntu):
        before = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
        config = _write_config(tmp_path, home, answers)
        CliRunner().invoke(
            cli,
            ["-q", "--config", str(config), "run", "--dry-run"],
            obj={
                "runner": MockRunner(binaries=["apt-get"]),
                "profile": ubuntu,
                "choices": AnswersChoiceProvider(answers),
            },
        )
        assert {sig: signal.getsignal(sig) for sig in before} == before
