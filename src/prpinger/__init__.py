"""Nudge a developer about one open pull request that needs team review."""

__version__ = "0.1.0"
