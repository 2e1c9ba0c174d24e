"""dotstrap — bootstrap a macOS/Linux workstation and back up its dotfiles."""

__version__ = "0.1.0"
