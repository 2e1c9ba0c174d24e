"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from dotstrap.adapters.mock import MockRunner
from dotstrap.core.models.config import BootstrapConfig, PathsConfig
from dotstrap.core.models.platform import OsKind, PackageManagerKind, PlatformProfile


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo any handlers a test (or a CLI invocation) installed."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


MACOS = PlatformProfile(
    os_kind=OsKind.MACOS,
    package_manager=PackageManagerKind.BREW,
    distro_id="macos",
)
UBUNTU = PlatformProfile(
    os_kind=OsKind.DEBIAN_LIKE,
    package_manager=PackageManagerKind.APT,
    distro_id="ubuntu",
)
ARCH = PlatformProfile(
    os_kind=OsKind.ARCH_LIKE,
    package_manager=PackageManagerKind.PACMAN,
    distro_id="arch",
)


@pytest.fixture
def answers() -> dict:
    """A complete set of canned answers."""
    return {
        "terminal": "ghostty",
        "theme": "Gruvbox",
        "prompt_style": "powerlevel10k",
        "nvim_theme": "gruvbox",
        "nvim_plugins": "nvim-tree/nvim-tree.lua, tpope/vim-fugitive",
        "show_line_numbers": True,
        "zsh_plugins": [1, 2],
    }


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def config(home: Path, answers: dict) -> BootstrapConfig:
    """Config rooted in the temporary home, with every path inside it."""
    return BootstrapConfig(
        home=home,
        paths=PathsConfig(
            applications=str(home / "Applications"),
            linux_font=str(home / "fonts" / "JetBrainsMonoNL-Regular.ttf"),
        ),
        answers=answers,
    )


@pytest.fixture
def dry_config(config: BootstrapConfig) -> BootstrapConfig:
    return config.model_copy(update={"dry_run": True})


@pytest.fixture
def mock_runner() -> MockRunner:
    """A mock runner with nothing installed."""
    return MockRunner()


@pytest.fixture
def macos() -> PlatformProfile:
    return MACOS


@pytest.fixture
def ubuntu() -> PlatformProfile:
    return UBUNTU


@pytest.fixture
def arch() -> PlatformProfile:
    return ARCH
