"""Services — detection, packages, features, backup and housekeeping."""
