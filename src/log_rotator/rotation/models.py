"""Data model for build log rotation.

Defines the policy modes, global pattern rules, the rotation configuration
snapshot, and the collaborator protocols (jobs, discard policies, job
registries) the engine talks to.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from log_rotator.config.validators import validate_update_interval
from log_rotator.rotation.errors import InvalidPatternError, UnsupportedPolicyModeError

DEFAULT_ROTATION_ENABLED = True
DEFAULT_UPDATE_INTERVAL_HOURS = 24


class PolicyMode(str, Enum):
    """How to rotate the build logs of one category of jobs."""

    NONE = "NONE"  # leave the job alone
    USE_OWN = "USE_OWN"  # use the job's own discarder
    USE_GLOBAL = "USE_GLOBAL"  # use the first matching global rule


# Names accepted by older configuration files.
_LEGACY_MODE_NAMES = {
    "CUSTOM": PolicyMode.USE_OWN,
    "GLOBAL": PolicyMode.USE_GLOBAL,
}

DEFAULT_POLICY_FOR_JOBS_WITH_OWN_DISCARDER = PolicyMode.USE_OWN
DEFAULT_POLICY_FOR_JOBS_WITHOUT_OWN_DISCARDER = PolicyMode.NONE

# Modes that make sense for jobs without a discarder of their own.
MODES_FOR_JOBS_WITHOUT_OWN_DISCARDER = frozenset({PolicyMode.NONE, PolicyMode.USE_GLOBAL})


def parse_policy_mode(value: PolicyMode | str) -> PolicyMode:
    """Parse a policy mode from its enum or string form.

    Strings are matched case-insensitively, and the legacy names CUSTOM and
    GLOBAL are mapped to USE_OWN and USE_GLOBAL.

    Args:
        value: A PolicyMode or its textual name.

    Returns:
        The parsed PolicyMode.

    Raises:
        UnsupportedPolicyModeError: If the value names no known mode.
    """
    if isinstance(value, PolicyMode):
        return value
    if not isinstance(value, str):
        raise UnsupportedPolicyModeError(
            f"Policy mode must be a string, got {type(value).__name__}"
        )

    name = value.strip().upper()
    if name in PolicyMode.__members__:
        return PolicyMode[name]
    if name in _LEGACY_MODE_NAMES:
        return _LEGACY_MODE_NAMES[name]

    accepted = ", ".join([*PolicyMode.__members__, *_LEGACY_MODE_NAMES])
    raise UnsupportedPolicyModeError(
        f"Unsupported policy mode {value!r}; expected one of: {accepted}"
    )


@dataclass(frozen=True)
class PatternRule:
    """A global rule: jobs whose full name matches the pattern use the discarder.

    The pattern must match the whole job name; ``rotator-.*`` matches
    ``rotator-foo`` but not ``team/rotator-foo``.

    Attributes:
        job_name_pattern: Regular expression matched against full job names.
        discarder: Key of the discard policy in the host's discarder catalog.
    """

    job_name_pattern: str
    discarder: str

    def __post_init__(self) -> None:
        if not isinstance(self.job_name_pattern, str):
            raise InvalidPatternError(str(self.job_name_pattern), "pattern must be a string")
        try:
            re.compile(self.job_name_pattern)
        except re.error as e:
            raise InvalidPatternError(self.job_name_pattern, str(e)) from None
        if not isinstance(self.discarder, str) or not self.discarder.strip():
            raise InvalidPatternError(
                self.job_name_pattern, "rule must name a discarder"
            )

    def matches(self, job_name: str) -> bool:
        """Return True if the whole job name matches this rule's pattern."""
        return re.fullmatch(self.job_name_pattern, job_name) is not None


class RotationConfig(BaseModel):
    """Snapshot of the rotation configuration.

    Instances are frozen: a pass reads one snapshot from the config store and
    never observes concurrent edits. Use ``model_copy(update=...)`` to derive a
    changed configuration.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rotation_enabled: bool = Field(
        default=DEFAULT_ROTATION_ENABLED, description="Master switch for periodic rotation"
    )
    update_interval_hours: int = Field(
        default=DEFAULT_UPDATE_INTERVAL_HOURS,
        description="Minimum hours between passes; zero or less disables rotation",
    )
    last_rotated_epoch_millis: int = Field(
        default=0, ge=0, description="When the last complete pass finished"
    )
    policy_for_jobs_with_own_discarder: PolicyMode = Field(
        default=DEFAULT_POLICY_FOR_JOBS_WITH_OWN_DISCARDER,
        description="Policy for jobs that define their own discarder",
    )
    policy_for_jobs_without_own_discarder: PolicyMode = Field(
        default=DEFAULT_POLICY_FOR_JOBS_WITHOUT_OWN_DISCARDER,
        description="Policy for jobs without a discarder (NONE or USE_GLOBAL)",
    )
    global_rules: tuple[PatternRule, ...] = Field(
        default=(), description="Ordered global rules; the first match wins"
    )

    @field_validator("update_interval_hours", mode="before")
    @classmethod
    def validate_update_interval(cls, v: int) -> int:
        """Reject booleans masquerading as intervals."""
        return validate_update_interval(v)

    @field_validator(
        "policy_for_jobs_with_own_discarder",
        "policy_for_jobs_without_own_discarder",
        mode="before",
    )
    @classmethod
    def parse_modes(cls, v: Any) -> PolicyMode:
        """Accept enum values, plain names and legacy names."""
        return parse_policy_mode(v)

    @field_validator("global_rules", mode="before")
    @classmethod
    def build_rules(cls, v: Any) -> tuple[PatternRule, ...]:
        """Build PatternRule instances from mappings, preserving order."""
        if v is None:
            return ()
        if isinstance(v, (str, bytes)) or not isinstance(v, Iterable):
            raise ValueError("global_rules must be a list of rules")
        rules = []
        for item in v:
            if isinstance(item, PatternRule):
                rules.append(item)
            elif isinstance(item, Mapping):
                unknown = set(item) - {"job_name_pattern", "discarder"}
                if unknown:
                    raise ValueError(f"Unknown rule keys: {sorted(unknown)}")
                rules.append(
                    PatternRule(
                        job_name_pattern=item.get("job_name_pattern", ""),
                        discarder=item.get("discarder", ""),
                    )
                )
            else:
                raise ValueError(f"Cannot build a global rule from {type(item).__name__}")
        return tuple(rules)

    @model_validator(mode="after")
    def check_mode_for_jobs_without_own_discarder(self) -> "RotationConfig":
        """Jobs without their own discarder have nothing to fall back on for USE_OWN."""
        if self.policy_for_jobs_without_own_discarder not in MODES_FOR_JOBS_WITHOUT_OWN_DISCARDER:
            raise ValueError(
                "policy_for_jobs_without_own_discarder must be NONE or USE_GLOBAL, got "
                f"{self.policy_for_jobs_without_own_discarder.value}"
            )
        return self

    def to_document(self) -> dict[str, Any]:
        """Return a plain mapping suitable for YAML persistence."""
        return self.model_dump(mode="json")


@runtime_checkable
class DiscardPolicy(Protocol):
    """Discards old build records for one job.

    Implementations may raise ApplyFailedError (or any other exception) on
    failure, and must let asyncio.CancelledError propagate.
    """

    async def apply(self, job: "Job") -> None: ...


@dataclass(frozen=True)
class Job:
    """A build job as seen by the rotator.

    Attributes:
        full_name: Fully-qualified, unique job name (e.g. ``folder/sub/job``).
        discarder: The job's own discard policy, or None if it defines none.
    """

    full_name: str
    discarder: DiscardPolicy | None = None

    @property
    def has_own_discarder(self) -> bool:
        return self.discarder is not None


class JobRegistry(Protocol):
    """Enumerates every job of the host, in a stable order."""

    def all_jobs(self) -> Iterable[Job]: ...


class StaticJobRegistry:
    """Job registry over a fixed sequence of jobs."""

    def __init__(self, jobs: Iterable[Job] = ()) -> None:
        self._jobs = list(jobs)

    def all_jobs(self) -> list[Job]:
        return list(self._jobs)
