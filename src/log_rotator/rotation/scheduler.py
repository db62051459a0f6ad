"""Decides whether enough time has passed to run a rotation pass."""

from log_rotator.rotation.models import RotationConfig

MILLIS_PER_HOUR = 3_600_000.0


def hours_since_last_rotation(config: RotationConfig, now_epoch_millis: int) -> float:
    """Return fractional hours elapsed since the last completed pass."""
    return (now_epoch_millis - config.last_rotated_epoch_millis) / MILLIS_PER_HOUR


def should_run(config: RotationConfig, now_epoch_millis: int) -> bool:
    """Return True if a rotation pass is due.

    A pass is due when rotation is enabled, the update interval is positive,
    and at least ``update_interval_hours`` hours (compared as floats, so 23.99
    hours is not 24) have elapsed since ``last_rotated_epoch_millis``.

    Args:
        config: Rotation configuration snapshot.
        now_epoch_millis: Current wall-clock time in epoch milliseconds.

    Returns:
        Whether the caller should run a pass now.
    """
    if not config.rotation_enabled or config.update_interval_hours <= 0:
        return False
    return hours_since_last_rotation(config, now_epoch_millis) >= config.update_interval_hours


def hours_until_due(config: RotationConfig, now_epoch_millis: int) -> float | None:
    """Return hours until the next pass is due.

    Returns:
        0.0 if a pass is due now, the remaining hours otherwise, or None when
        periodic rotation is disabled.
    """
    if not config.rotation_enabled or config.update_interval_hours <= 0:
        return None
    remaining = config.update_interval_hours - hours_since_last_rotation(config, now_epoch_millis)
    return max(remaining, 0.0)
