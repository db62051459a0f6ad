"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Scheduling events
ROTATION_CHECK = "rotation_check"
ROTATION_NOT_DUE = "rotation_not_due"
ROTATION_TICK_BUSY = "rotation_tick_busy"

# Pass events
ROTATION_PASS_STARTED = "rotation_pass_started"
ROTATION_PASS_COMPLETED = "rotation_pass_completed"
ROTATION_PASS_CANCELLED = "rotation_pass_cancelled"

# Per-job events
ROTATION_JOB_APPLIED = "rotation_job_applied"
ROTATION_JOB_SKIPPED = "rotation_job_skipped"
ROTATION_JOB_FAILED = "rotation_job_failed"
ROTATION_NO_MATCHING_RULE = "rotation_no_matching_rule"
ROTATION_UNSUPPORTED_POLICY = "rotation_unsupported_policy"

# Config store events
ROTATION_CONFIG_LOADED = "rotation_config_loaded"
ROTATION_CONFIG_SAVED = "rotation_config_saved"
ROTATION_CONFIG_INVALID = "rotation_config_invalid"
ROTATION_TIMESTAMP_UPDATED = "rotation_timestamp_updated"
