"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from log_rotator.telemetry.events import (
    ROTATION_CHECK,
    ROTATION_CONFIG_INVALID,
    ROTATION_CONFIG_LOADED,
    ROTATION_CONFIG_SAVED,
    ROTATION_JOB_APPLIED,
    ROTATION_JOB_FAILED,
    ROTATION_JOB_SKIPPED,
    ROTATION_NO_MATCHING_RULE,
    ROTATION_NOT_DUE,
    ROTATION_PASS_CANCELLED,
    ROTATION_PASS_COMPLETED,
    ROTATION_PASS_STARTED,
    ROTATION_TICK_BUSY,
    ROTATION_TIMESTAMP_UPDATED,
    ROTATION_UNSUPPORTED_POLICY,
)
from log_rotator.telemetry.logger import configure_logging, get_logger

__all__ = [
    # Core exports
    "get_logger",
    "configure_logging",
    # Event constants
    "ROTATION_CHECK",
    "ROTATION_NOT_DUE",
    "ROTATION_TICK_BUSY",
    "ROTATION_PASS_STARTED",
    "ROTATION_PASS_COMPLETED",
    "ROTATION_PASS_CANCELLED",
    "ROTATION_JOB_APPLIED",
    "ROTATION_JOB_SKIPPED",
    "ROTATION_JOB_FAILED",
    "ROTATION_NO_MATCHING_RULE",
    "ROTATION_UNSUPPORTED_POLICY",
    "ROTATION_CONFIG_LOADED",
    "ROTATION_CONFIG_SAVED",
    "ROTATION_CONFIG_INVALID",
    "ROTATION_TIMESTAMP_UPDATED",
]
