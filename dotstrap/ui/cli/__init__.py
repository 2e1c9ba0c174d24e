"""CLI command groups registered by ``dotstrap.main``."""
