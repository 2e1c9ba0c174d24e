"""Core layer — models, configuration, engine and services."""
