"""Build log rotation engine.

Decides, for every job of the host, whether to discard old build records and
with which discard policy, and runs those policies on a periodic schedule.
"""

from log_rotator.rotation.errors import (
    ApplyFailedError,
    InvalidPatternError,
    RotationError,
    UnsupportedPolicyModeError,
)
from log_rotator.rotation.models import (
    DiscardPolicy,
    Job,
    JobRegistry,
    PatternRule,
    PolicyMode,
    RotationConfig,
    StaticJobRegistry,
    parse_policy_mode,
)
from log_rotator.rotation.resolver import Action, Decision, first_matching_rule, resolve
from log_rotator.rotation.runner import JobOutcome, OutcomeStatus, RotationRunner, RunReport
from log_rotator.rotation.scheduler import hours_until_due, should_run
from log_rotator.rotation.store import (
    ConfigStore,
    ConfigStoreError,
    InMemoryConfigStore,
    YamlConfigStore,
)
from log_rotator.rotation.task import RotationTask

__all__ = [
    # Models
    "PolicyMode",
    "PatternRule",
    "RotationConfig",
    "Job",
    "DiscardPolicy",
    "JobRegistry",
    "StaticJobRegistry",
    "parse_policy_mode",
    # Resolution and scheduling
    "Action",
    "Decision",
    "resolve",
    "first_matching_rule",
    "should_run",
    "hours_until_due",
    # Execution
    "RotationRunner",
    "RunReport",
    "JobOutcome",
    "OutcomeStatus",
    "RotationTask",
    # Config stores
    "ConfigStore",
    "InMemoryConfigStore",
    "YamlConfigStore",
    # Errors
    "RotationError",
    "InvalidPatternError",
    "UnsupportedPolicyModeError",
    "ApplyFailedError",
    "ConfigStoreError",
]
