"""
Tests for the feature steps — detect, install if absent, write artifact.
"""

import logging
from pathlib import Path

import pytest

from dotstrap.adapters.mock import MockRunner
from dotstrap.core.engine.executor import StepContext
from dotstrap.core.errors import InstallError, MissingAnswer, PackageManagerMissing, UpgradeError
from dotstrap.core.models.config import BootstrapConfig
from dotstrap.core.models.platform import PlatformProfile
from dotstrap.core.persistence.artifacts import backup_path
from dotstrap.core.services.choices import AnswersChoiceProvider
from dotstrap.core.services.features.editor import install_nvim_and_configure
from dotstrap.core.services.features.fonts import install_nerd_fonts
from dotstrap.core.services.features.package_manager import ensure_package_manager
from dotstrap.core.services.features.shell import install_and_configure_zsh
from dotstrap.core.services.features.ssh import check_git_and_ssh_key, keygen_command
from dotstrap.core.services.features.system import log_installed_apps, update_system_apps
from dotstrap.core.services.features.terminal import check_terminal_emulator, setup_terminal_theme
from dotstrap.core.use_cases.run import build_context


def _ctx(config: BootstrapConfig, profile: PlatformProfile, runner: MockRunner) -> StepContext:
    return build_context(
        config,
        profile,
        runner,
        choices=AnswersChoiceProvider(config.answers),
        use_sudo=False,
    )


def _with_answers(config: BootstrapConfig, **answers) -> BootstrapConfig:
    return config.model_copy(update={"answers": {**config.answers, **answers}})


# ── Package manager ──────────────────────────────────────────────────


class TestPackageManager:
    def test_present(self, config, macos):
        ctx = _ctx(config, macos, MockRunner(binaries=["brew"]))
        assert ensure_package_manager(ctx).ok
        assert ctx.runner.call_log == []

    def test_installs_homebrew_on_macos(self, config, macos):
        runner = MockRunner()
        receipt = ensure_package_manager(_ctx(config, macos, runner))
        assert receipt.ok
        assert runner.call_log[0][0] == "/bin/bash"
        assert "Homebrew/install" in runner.call_log[0][-1]

    def test_homebrew_dry_run(self, dry_config, macos):
        runner = MockRunner()
        receipt = ensure_package_manager(_ctx(dry_config, macos, runner))
        assert receipt.status == "skipped"
        assert runner.call_log == []

    def test_homebrew_install_failure(self, config, macos):
        runner = MockRunner()
        runner.set_failure("/bin/bash")
        with pytest.raises(InstallError):
            ensure_package_manager(_ctx(config, macos, runner))

    def test_missing_on_linux(self, config, ubuntu):
        with pytest.raises(PackageManagerMissing, match="apt"):
            ensure_package_manager(_ctx(config, ubuntu, MockRunner()))


# ── Terminal ─────────────────────────────────────────────────────────


class TestTerminal:
    def test_existing_terminal_skips_menu(self, config, macos):
        runner = MockRunner(binaries=["brew", "alacritty"])
        config = _with_answers(config, terminal=None)
        receipt = check_terminal_emulator(_ctx(config, macos, runner))
        assert receipt.ok
        assert receipt.metadata["terminal"] == "alacritty"
        assert runner.call_log == []

    def test_existing_app_bundle(self, config, macos):
        (config.path("applications") / "iTerm2.app").mkdir(parents=True)
        runner = MockRunner(binaries=["brew"])
        receipt = check_terminal_emulator(_ctx(config, macos, runner))
        assert receipt.metadata["terminal"] == "iTerm2"

    def test_installs_chosen_terminal_as_cask(self, config, macos):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        receipt = check_terminal_emulator(_ctx(config, macos, runner))
        assert receipt.ok
        assert ["brew", "install", "--cask", "ghostty"] in runner.call_log

    def test_theme_written(self, config, macos):
        ctx = _ctx(config, macos, MockRunner(binaries=["brew"]))
        receipt = setup_terminal_theme(ctx)
        text = config.path("terminal_config").read_text()
        assert receipt.ok
        assert 'TERM_THEME="gruvbox"' in text
        assert ctx.selections == {"theme": "gruvbox", "prompt_style": "powerlevel10k"}

    def test_custom_theme(self, config, macos):
        config = _with_answers(config, theme="Custom", custom_theme="dracula")
        setup_terminal_theme(_ctx(config, macos, MockRunner()))
        assert 'TERM_THEME="dracula"' in config.path("terminal_config").read_text()

    def test_custom_theme_needs_a_name(self, config, macos):
        config = _with_answers(config, theme="Custom", custom_theme="  ")
        with pytest.raises(MissingAnswer):
            setup_terminal_theme(_ctx(config, macos, MockRunner()))

    def test_theme_dry_run(self, dry_config, macos):
        receipt = setup_terminal_theme(_ctx(dry_config, macos, MockRunner()))
        assert receipt.status == "skipped"
        assert not dry_config.path("terminal_config").exists()


# ── Fonts ────────────────────────────────────────────────────────────


class TestFonts:
    def test_macos_font_file_present(self, config, macos):
        font = config.path("mac_font")
        font.parent.mkdir(parents=True)
        font.write_text("")
        runner = MockRunner(binaries=["brew"])
        assert install_nerd_fonts(_ctx(config, macos, runner)).ok
        assert runner.call_log == []

    def test_macos_installs_cask(self, config, macos):
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew list")
        install_nerd_fonts(_ctx(config, macos, runner))
        assert ["brew", "install", "--cask", "font-jetbrains-mono-nerd-font"] in runner.call_log

    def test_linux_tries_candidates(self, config, ubuntu):
        runner = MockRunner(binaries=["apt-get"])
        runner.set_failure("apt-get install -y fonts-jetbrains-mono")
        receipt = install_nerd_fonts(_ctx(config, ubuntu, runner))
        assert receipt.ok
        assert receipt.metadata["package"] == "ttf-jetbrains-mono"

    def test_arch_prefers_ttf(self, config, arch):
        runner = MockRunner(binaries=["pacman"])
        runner.set_failure("pacman -Q")
        install_nerd_fonts(_ctx(config, arch, runner))
        assert runner.calls_matching("pacman -Syu")[0][-1] == "ttf-jetbrains-mono"


# ── System maintenance ───────────────────────────────────────────────


class TestSystem:
    def test_upgrade_disabled_by_default(self, config, ubuntu):
        runner = MockRunner(binaries=["apt-get"])
        assert update_system_apps(_ctx(config, ubuntu, runner)).status == "skipped"
        assert runner.call_log == []

    def test_upgrade(self, config, ubuntu):
        config = config.model_copy(update={"upgrade_packages": True})
        runner = MockRunner(binaries=["apt-get"])
        assert update_system_apps(_ctx(config, ubuntu, runner)).ok
        assert runner.call_log == [["apt-get", "update"], ["apt-get", "upgrade", "-y"]]

    def test_upgrade_dry_run(self, dry_config, ubuntu):
        config = dry_config.model_copy(update={"upgrade_packages": True})
        runner = MockRunner(binaries=["apt-get"])
        assert update_system_apps(_ctx(config, ubuntu, runner)).status == "skipped"
        assert runner.call_log == []

    def test_upgrade_failure(self, config, macos):
        config = config.model_copy(update={"upgrade_packages": True})
        runner = MockRunner(binaries=["brew"])
        runner.set_failure("brew upgrade")
        with pytest.raises(UpgradeError):
            update_system_apps(_ctx(config, macos, runner))

    def test_installed_apps_listing(self, config, macos):
        runner = MockRunner(binaries=["brew"])
        runner.set_response("brew list", stdout="git\nneovim\nzsh\n")
        receipt = log_installed_apps(_ctx(config, macos, runner))
        assert receipt.metadata["count"] == 3
        assert config.installed_apps_file.read_text() == "git\nneovim\nzsh\n"


# ── Editor ───────────────────────────────────────────────────────────


class TestEditor:
    def test_installs_and_writes_init(self, config, ubuntu):
        runner = MockRunner(binaries=["apt-get"])
        receipt = install_nvim_and_configure(_ctx(config, ubuntu, runner))
        text = config.path("nvim_init").read_text()
        assert receipt.ok
        assert ["apt-get", "install", "-y", "neovim"] in runner.call_log
        assert "  use 'tpope/vim-fugitive'" in text

    def test_present_nvim_writes_missing_init(self, config, ubuntu):
        runner = MockRunner(binaries=["apt-get", "nvim"])
        install_nvim_and_configure(_ctx(config, ubuntu, runner))
        assert config.path("nvim_init").is_file()
        assert runner.call_log == []

    def test_present_nvim_keeps_existing_init(self, config, ubuntu):
        init_lua = config.path("nvim_init")
        init_lua.parent.mkdir(parents=True)
        init_lua.write_text("-- my hand-tuned config\n")

        receipt = install_nvim_and_configure(_ctx(config, ubuntu, MockRunner(binaries=["nvim"])))

        assert receipt.ok
        assert receipt.metadata["outcome"] == "already_present"
        assert init_lua.read_text() == "-- my hand-tuned config\n"
        assert not backup_path(init_lua).exists()

    def test_fresh_install_replaces_init(self, config, ubuntu):
        init_lua = config.path("nvim_init")
        init_lua.parent.mkdir(parents=True)
        init_lua.write_text("-- leftover\n")

        install_nvim_and_configure(_ctx(config, ubuntu, MockRunner(binaries=["apt-get"])))

        assert "packer" in init_lua.read_text()

    def test_theme_defaults_to_terminal_theme(self, config, ubuntu):
        config = _with_answers(config, nvim_theme=None)
        ctx = _ctx(config, ubuntu, MockRunner(binaries=["nvim"]))
        ctx.selections["theme"] = "onedark"
        install_nvim_and_configure(ctx)
        assert 'colorscheme onedark' in config.path("nvim_init").read_text()


# ── Shell ────────────────────────────────────────────────────────────


class TestShell:
    def _ready(self, config: BootstrapConfig) -> None:
        config.path("zinit_home").mkdir(parents=True)

    def test_writes_zshrc_with_plugins(self, config, ubuntu):
        self._ready(config)
        ctx = _ctx(config, ubuntu, MockRunner(binaries=["zsh"]))
        ctx.selections["prompt_style"] = "oh-my-zsh"
        receipt = install_and_configure_zsh(ctx)
        text = config.path("zshrc").read_text()
        assert receipt.ok
        assert "zinit light zsh-users/zsh-syntax-highlighting" in text
        assert "zinit light zsh-users/zsh-autosuggestions" in text
        assert "zsh-completions" not in text
        assert 'export ZINIT_HOME="$HOME/.zinit"' in text
        assert 'ZSH_THEME="robbyrussell"' in text

    def test_keeps_single_backup(self, config, ubuntu):
        self._ready(config)
        zshrc = config.path("zshrc")
        zshrc.write_text("# handwritten\n")
        ctx = _ctx(config, ubuntu, MockRunner(binaries=["zsh"]))
        install_and_configure_zsh(ctx)
        first = zshrc.read_text()
        install_and_configure_zsh(ctx)
        assert zshrc.read_text() == first
        assert backup_path(zshrc).read_text() == first
        assert sorted(p.name for p in zshrc.parent.glob(".zshrc*")) == [".zshrc", ".zshrc.bak"]

    def test_bootstraps_zinit(self, config, ubuntu):
        runner = MockRunner(binaries=["zsh"])
        receipt = install_and_configure_zsh(_ctx(config, ubuntu, runner))
        assert receipt.metadata["zinit"] is True
        assert "zinit" in runner.call_log[0][-1]

    def test_zinit_failure_still_writes_zshrc(self, config, ubuntu, caplog):
        caplog.set_level(logging.INFO)
        runner = MockRunner(binaries=["zsh"])
        runner.set_failure("sh -c")
        receipt = install_and_configure_zsh(_ctx(config, ubuntu, runner))
        assert receipt.ok
        assert receipt.metadata["zinit"] is False
        assert config.path("zshrc").is_file()
        assert "zinit installation failed" in caplog.text

    def test_single_numeric_plugin_answer(self, config, ubuntu):
        self._ready(config)
        config = _with_answers(config, zsh_plugins=2)
        receipt = install_and_configure_zsh(_ctx(config, ubuntu, MockRunner(binaries=["zsh"])))
        text = config.path("zshrc").read_text()
        assert receipt.ok
        assert "zinit light zsh-users/zsh-autosuggestions" in text
        assert "zsh-syntax-highlighting" not in text

    def test_installs_zsh_when_missing(self, config, ubuntu):
        self._ready(config)
        runner = MockRunner(binaries=["apt-get"])
        install_and_configure_zsh(_ctx(config, ubuntu, runner))
        assert ["apt-get", "install", "-y", "zsh"] in runner.call_log


# ── git / SSH ────────────────────────────────────────────────────────


class TestGitSsh:
    def test_generates_key_once(self, config, ubuntu, capsys):
        key = config.ssh_key

        def keygen(argv):
            key.with_name(key.name + ".pub").write_text("ssh-rsa AAAA test\n")

        runner = MockRunner(binaries=["git"])
        runner.set_effect("ssh-keygen", keygen)

        first = check_git_and_ssh_key(_ctx(config, ubuntu, runner))
        assert first.metadata["generated"] is True
        out = capsys.readouterr().out
        assert "ssh-rsa AAAA test" in out
        assert "https://github.com/settings/keys" in out

        second = check_git_and_ssh_key(_ctx(config, ubuntu, runner))
        assert second.metadata["generated"] is False
        assert len(runner.calls_matching("ssh-keygen")) == 1

    def test_installs_git(self, config, ubuntu):
        runner = MockRunner(binaries=["apt-get"])
        check_git_and_ssh_key(_ctx(config, ubuntu, runner))
        assert ["apt-get", "install", "-y", "git"] in runner.call_log

    def test_dry_run_never_generates(self, dry_config, ubuntu):
        runner = MockRunner(binaries=["git"])
        receipt = check_git_and_ssh_key(_ctx(dry_config, ubuntu, runner))
        assert receipt.status == "skipped"
        assert runner.call_log == []
        assert not dry_config.ssh_key.parent.exists()

    def test_keygen_command(self, config):
        argv = keygen_command(Path("/k/id_rsa"), config.ssh)
        assert argv == [
            "ssh-keygen", "-t", "rsa", "-b", "4096",
            "-C", "your_email@example.com", "-f", "/k/id_rsa", "-N", "",
        ]
