"""Runs one rotation pass over every job."""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from log_rotator.rotation.errors import ApplyFailedError
from log_rotator.rotation.models import DiscardPolicy, Job, RotationConfig
from log_rotator.rotation.resolver import Action, Decision, resolve
from log_rotator.rotation.store import ConfigStore
from log_rotator.telemetry import (
    ROTATION_JOB_APPLIED,
    ROTATION_JOB_FAILED,
    ROTATION_JOB_SKIPPED,
    ROTATION_NO_MATCHING_RULE,
    ROTATION_PASS_CANCELLED,
    ROTATION_PASS_COMPLETED,
    ROTATION_PASS_STARTED,
    ROTATION_UNSUPPORTED_POLICY,
    get_logger,
)

log = get_logger(__name__)


def _mode_name(mode: Any) -> str:
    return str(getattr(mode, "value", mode))


class OutcomeStatus(str, Enum):
    """What happened to one job during a pass."""

    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class JobOutcome:
    """Result of processing one job.

    ``decision`` is None when the job failed before its policy was resolved.
    """

    job_name: str
    status: OutcomeStatus
    decision: Decision | None
    rule_index: int | None = None
    reason: str | None = None


@dataclass
class RunReport:
    """Result of one complete rotation pass."""

    started_at_epoch_millis: int
    outcomes: list[JobOutcome] = field(default_factory=list)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def applied_count(self) -> int:
        return self._count(OutcomeStatus.APPLIED)

    @property
    def skipped_count(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def failures(self) -> list[JobOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.FAILED]


class RotationRunner:
    """Applies discard policies to jobs according to the rotation config.

    Each job is processed independently: a failing discarder is recorded and
    the pass moves on. Only cancellation (asyncio.CancelledError) ends a pass
    early, in which case the last-rotated timestamp is left untouched so the
    next tick retries the whole pass.

    Usage:
        runner = RotationRunner(store, discarders={"keep-10": KeepLast(10)})
        report = await runner.run(registry.all_jobs(), store.load(), now_ms)
    """

    def __init__(
        self,
        config_store: ConfigStore,
        discarders: Mapping[str, DiscardPolicy] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config_store: Store whose timestamp is advanced after each pass.
            discarders: Catalog of discard policies referenced by global rules.
        """
        self._config_store = config_store
        self._discarders: Mapping[str, DiscardPolicy] = discarders or {}

    async def run(
        self, jobs: Iterable[Job], config: RotationConfig, now_epoch_millis: int
    ) -> RunReport:
        """Run one pass over all jobs.

        Args:
            jobs: Jobs to process, in the order they should be processed.
            config: Configuration snapshot for the whole pass.
            now_epoch_millis: Time the pass counts as having run at.

        Returns:
            RunReport with one outcome per processed job.

        Raises:
            asyncio.CancelledError: If a discarder (or the caller) cancels the
                pass. The timestamp is not advanced.
        """
        report = RunReport(started_at_epoch_millis=now_epoch_millis)
        log.info(
            ROTATION_PASS_STARTED,
            rules_count=len(config.global_rules),
            policy_with_own=_mode_name(config.policy_for_jobs_with_own_discarder),
            policy_without_own=_mode_name(config.policy_for_jobs_without_own_discarder),
        )

        try:
            for job in jobs:
                report.outcomes.append(await self._process(job, config))
        except asyncio.CancelledError:
            log.info(
                ROTATION_PASS_CANCELLED,
                processed=len(report.outcomes),
                applied=report.applied_count,
            )
            raise

        self._config_store.mark_rotated(now_epoch_millis)
        log.info(
            ROTATION_PASS_COMPLETED,
            jobs=len(report.outcomes),
            applied=report.applied_count,
            skipped=report.skipped_count,
            failed=report.failed_count,
        )
        return report

    async def _process(self, job: Job, config: RotationConfig) -> JobOutcome:
        """Resolve and apply the policy for one job, isolating failures."""
        action: Action | None = None
        try:
            if job.has_own_discarder:
                mode = config.policy_for_jobs_with_own_discarder
            else:
                mode = config.policy_for_jobs_without_own_discarder
            action = resolve(job.has_own_discarder, mode, config.global_rules, job.full_name)

            if action.decision is Decision.UNSUPPORTED_MODE:
                reason = f"unsupported policy {_mode_name(mode)!r}"
                log.error(
                    ROTATION_UNSUPPORTED_POLICY,
                    job_name=job.full_name,
                    has_own_discarder=job.has_own_discarder,
                    mode=_mode_name(mode),
                )
                return JobOutcome(
                    job.full_name, OutcomeStatus.FAILED, action.decision, reason=reason
                )

            if action.decision is Decision.SKIP:
                log.debug(
                    ROTATION_JOB_SKIPPED, job_name=job.full_name, decision=action.decision.value
                )
                return JobOutcome(job.full_name, OutcomeStatus.SKIPPED, action.decision)

            if action.decision is Decision.APPLY_GLOBAL and action.rule_index is None:
                log.debug(ROTATION_NO_MATCHING_RULE, job_name=job.full_name)
                return JobOutcome(job.full_name, OutcomeStatus.SKIPPED, action.decision)

            discarder = self._discarder_for(job, action, config)
            await discarder.apply(job)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            reason = e.reason if isinstance(e, ApplyFailedError) else f"{type(e).__name__}: {e}"
            decision = action.decision if action is not None else None
            rule_index = action.rule_index if action is not None else None
            log.warning(
                ROTATION_JOB_FAILED,
                job_name=job.full_name,
                decision=decision.value if decision is not None else None,
                rule_index=rule_index,
                reason=reason,
                exc_info=True,
            )
            return JobOutcome(
                job.full_name,
                OutcomeStatus.FAILED,
                decision,
                rule_index=rule_index,
                reason=reason,
            )

        log.debug(
            ROTATION_JOB_APPLIED,
            job_name=job.full_name,
            decision=action.decision.value,
            rule_index=action.rule_index,
        )
        return JobOutcome(
            job.full_name, OutcomeStatus.APPLIED, action.decision, rule_index=action.rule_index
        )

    def _discarder_for(self, job: Job, action: Action, config: RotationConfig) -> DiscardPolicy:
        if action.decision is Decision.APPLY_OWN:
            assert job.discarder is not None
            return job.discarder

        assert action.rule_index is not None
        rule = config.global_rules[action.rule_index]
        try:
            return self._discarders[rule.discarder]
        except KeyError:
            raise ApplyFailedError(
                f"rule {action.rule_index} ({rule.job_name_pattern!r}) names unknown "
                f"discarder {rule.discarder!r}"
            ) from None
