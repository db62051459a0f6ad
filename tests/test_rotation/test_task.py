"""Tests for RotationTask, the periodic entry point."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from log_rotator.rotation.models import (
    Job,
    PatternRule,
    PolicyMode,
    RotationConfig,
    StaticJobRegistry,
)
from log_rotator.rotation.store import ConfigStoreError, InMemoryConfigStore, YamlConfigStore
from log_rotator.rotation.task import RotationTask, now_epoch_millis

HOUR = 3_600_000
NOW = 1_700_000_000_000


def _store(**overrides: object) -> InMemoryConfigStore:
    values: dict[str, object] = {
        "update_interval_hours": 24,
        "last_rotated_epoch_millis": NOW - 25 * HOUR,
    }
    values.update(overrides)
    return InMemoryConfigStore(RotationConfig.model_validate(values))


@pytest.mark.asyncio
class TestTick:
    """Test tick gating and pass execution."""

    async def test_due_tick_runs_pass(self) -> None:
        """Test that a due tick processes every job and records the pass."""
        discarder = AsyncMock()
        jobs = [Job("a", discarder=discarder), Job("b", discarder=discarder)]
        store = _store()
        task = RotationTask(store, StaticJobRegistry(jobs))

        report = await task.tick(NOW)

        assert report is not None
        assert report.applied_count == 2
        assert store.load().last_rotated_epoch_millis == NOW

    async def test_not_due_tick_does_nothing(self) -> None:
        """Test that a tick before the interval elapses skips the pass."""
        registry = MagicMock()
        store = _store(last_rotated_epoch_millis=NOW - HOUR)
        task = RotationTask(store, registry)

        assert await task.tick(NOW) is None
        registry.all_jobs.assert_not_called()

    async def test_disabled_rotation_never_runs(self) -> None:
        """Test that disabled rotation never enumerates jobs."""
        registry = MagicMock()
        task = RotationTask(_store(rotation_enabled=False, last_rotated_epoch_millis=0), registry)

        assert await task.tick(NOW) is None
        registry.all_jobs.assert_not_called()

    async def test_two_ticks_in_succession_run_one_pass(self) -> None:
        """Test that a second tick right after a pass does not run again."""
        discarder = AsyncMock()
        task = RotationTask(_store(), StaticJobRegistry([Job("a", discarder=discarder)]))

        first = await task.tick(NOW)
        second = await task.tick(NOW + 1_000)

        assert first is not None
        assert second is None
        assert discarder.apply.await_count == 1

    async def test_next_interval_runs_again(self) -> None:
        """Test that a pass runs again once the interval has elapsed."""
        discarder = AsyncMock()
        task = RotationTask(_store(), StaticJobRegistry([Job("a", discarder=discarder)]))

        await task.tick(NOW)
        await task.tick(NOW + 24 * HOUR)

        assert discarder.apply.await_count == 2

    async def test_default_now_uses_wall_clock(self) -> None:
        """Test that omitting now uses the current time."""
        store = _store(last_rotated_epoch_millis=0)
        task = RotationTask(store, StaticJobRegistry([]))
        before = now_epoch_millis()

        report = await task.tick()

        assert report is not None
        assert store.load().last_rotated_epoch_millis >= before

    async def test_busy_tick_is_skipped(self) -> None:
        """Test that a tick arriving during a pass does not start another."""
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_apply(job: Job) -> None:
            started.set()
            await release.wait()

        discarder = AsyncMock()
        discarder.apply.side_effect = slow_apply
        store = _store()
        task = RotationTask(store, StaticJobRegistry([Job("a", discarder=discarder)]))

        running = asyncio.create_task(task.tick(NOW))
        await started.wait()
        assert await task.tick(NOW) is None
        release.set()
        report = await running

        assert report is not None
        assert discarder.apply.await_count == 1
        assert task.running is False


@pytest.mark.asyncio
class TestCancelledTick:
    """Test cancellation through the task entry point."""

    async def test_cancelled_pass_is_retried_from_scratch(self) -> None:
        """Test that a cancelled pass leaves the timestamp and reruns every job."""
        first = AsyncMock()
        second = AsyncMock()
        second.apply.side_effect = [asyncio.CancelledError(), None]
        jobs = [Job("first", discarder=first), Job("second", discarder=second)]
        store = _store()
        previous = store.load().last_rotated_epoch_millis
        task = RotationTask(store, StaticJobRegistry(jobs))

        with pytest.raises(asyncio.CancelledError):
            await task.tick(NOW)

        assert store.load().last_rotated_epoch_millis == previous
        assert task.running is False

        report = await task.tick(NOW + 60_000)

        assert report is not None
        assert first.apply.await_count == 2
        assert store.load().last_rotated_epoch_millis == NOW + 60_000

    async def test_cancelling_the_tick_task(self) -> None:
        """Test that cancelling the asyncio task running tick aborts the pass."""
        started = asyncio.Event()

        async def hang(job: Job) -> None:
            started.set()
            await asyncio.sleep(3600)

        blocking = AsyncMock()
        blocking.apply.side_effect = hang
        never = AsyncMock()
        store = _store()
        previous = store.load().last_rotated_epoch_millis
        jobs = [Job("blocking", discarder=blocking), Job("never", discarder=never)]
        task = RotationTask(store, StaticJobRegistry(jobs))

        running = asyncio.create_task(task.tick(NOW))
        await started.wait()
        running.cancel()
        with pytest.raises(asyncio.CancelledError):
            await running

        never.apply.assert_not_awaited()
        assert store.load().last_rotated_epoch_millis == previous


@pytest.mark.asyncio
class TestTickWithYamlStore:
    """Test tick against the file-backed store."""

    async def test_global_rules_from_file(self, tmp_path: Path) -> None:
        """Test a full pass driven by a YAML configuration."""
        store = YamlConfigStore(tmp_path / "rotation.yaml")
        store.save(
            RotationConfig(
                policy_for_jobs_without_own_discarder=PolicyMode.USE_GLOBAL,
                global_rules=[PatternRule("rotator-.*", "specific"), PatternRule(".*", "catchall")],
            )
        )
        specific = AsyncMock()
        catchall = AsyncMock()
        job = Job("rotator-foo")
        task = RotationTask(
            store,
            StaticJobRegistry([job]),
            discarders={"specific": specific, "catchall": catchall},
        )

        report = await task.tick(NOW)

        assert report is not None
        specific.apply.assert_awaited_once_with(job)
        catchall.apply.assert_not_awaited()
        assert store.load().last_rotated_epoch_millis == NOW

    async def test_invalid_config_propagates(self, tmp_path: Path) -> None:
        """Test that an unreadable config is reported and no pass runs."""
        path = tmp_path / "rotation.yaml"
        path.write_text("update_interval_hours: [1, 2]\n")
        registry = MagicMock()
        task = RotationTask(YamlConfigStore(path), registry)

        with pytest.raises(ConfigStoreError):
            await task.tick(NOW)

        registry.all_jobs.assert_not_called()
        assert task.running is False
