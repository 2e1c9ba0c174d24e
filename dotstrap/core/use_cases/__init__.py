"""Use cases — top-level flows invoked by the CLI."""
