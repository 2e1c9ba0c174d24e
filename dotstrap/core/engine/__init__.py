"""Step executor."""
