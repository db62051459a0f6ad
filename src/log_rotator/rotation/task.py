"""Periodic rotation task: the entry point an external scheduler calls."""

from collections.abc import Mapping
from datetime import datetime, timezone

from log_rotator.rotation.models import DiscardPolicy, JobRegistry
from log_rotator.rotation.runner import RotationRunner, RunReport
from log_rotator.rotation.scheduler import hours_since_last_rotation, should_run
from log_rotator.rotation.store import ConfigStore
from log_rotator.telemetry import (
    ROTATION_CHECK,
    ROTATION_NOT_DUE,
    ROTATION_TICK_BUSY,
    get_logger,
)

log = get_logger(__name__)

# Suggested cadence for the external scheduler.
RECOMMENDED_TICK_INTERVAL_SECONDS = 60


def now_epoch_millis() -> int:
    """Return the current UTC time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class RotationTask:
    """Checks on every tick whether build logs are due for rotation, and rotates them.

    Each tick loads one configuration snapshot from the store. When a pass is
    due, every job from the registry is processed by a RotationRunner, which
    advances the store's last-rotated timestamp on completion. Ticks that
    arrive while a pass is still running are ignored.

    Usage:
        task = RotationTask(store, registry, discarders={"keep-10": KeepLast(10)})
        report = await task.tick()  # None when no pass was due
    """

    def __init__(
        self,
        config_store: ConfigStore,
        job_registry: JobRegistry,
        discarders: Mapping[str, DiscardPolicy] | None = None,
    ) -> None:
        """Initialize the task.

        Args:
            config_store: Source of the rotation configuration.
            job_registry: Enumerates the host's jobs once per pass.
            discarders: Catalog of discard policies referenced by global rules.
        """
        self.config_store = config_store
        self.job_registry = job_registry
        self.runner = RotationRunner(config_store, discarders)
        self.running = False

    async def tick(self, now: int | None = None) -> RunReport | None:
        """Run a rotation pass if one is due.

        Args:
            now: Current time in epoch milliseconds; defaults to the wall clock.

        Returns:
            The RunReport of the pass, or None if no pass ran.

        Raises:
            ConfigStoreError: If the stored configuration is unreadable.
            asyncio.CancelledError: If the pass was cancelled.
        """
        if self.running:
            log.warning(ROTATION_TICK_BUSY)
            return None

        if now is None:
            now = now_epoch_millis()

        self.running = True
        try:
            config = self.config_store.load()
            due = should_run(config, now)
            log.debug(
                ROTATION_CHECK,
                due=due,
                rotation_enabled=config.rotation_enabled,
                update_interval_hours=config.update_interval_hours,
                hours_since_last=round(hours_since_last_rotation(config, now), 3),
            )
            if not due:
                log.debug(ROTATION_NOT_DUE)
                return None

            jobs = list(self.job_registry.all_jobs())
            return await self.runner.run(jobs, config, now)
        finally:
            self.running = False
