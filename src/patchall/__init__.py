"""patchall — build, patch, and restore tracked file trees."""

__version__ = "0.3.0"
