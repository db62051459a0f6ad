"""Periodic build log rotation for CI job orchestrators."""

__version__ = "0.1.0"
