"""Policy resolution: which discard action applies to a job.

Resolution is pure. It looks only at whether the job has its own discarder,
the configured policy mode for that category of job, the ordered global rules
and the job name.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from log_rotator.rotation.models import PatternRule, PolicyMode


class Decision(str, Enum):
    """Outcome category of policy resolution."""

    SKIP = "skip"
    APPLY_OWN = "apply_own"
    APPLY_GLOBAL = "apply_global"
    UNSUPPORTED_MODE = "unsupported_mode"


@dataclass(frozen=True)
class Action:
    """What to do with one job.

    Attributes:
        decision: The resolved decision.
        mode: The policy mode the decision was derived from.
        rule_index: For APPLY_GLOBAL, index of the first matching global rule,
            or None when no rule matches (no action is taken in that case).
    """

    decision: Decision
    mode: Any
    rule_index: int | None = None

    @property
    def matched(self) -> bool:
        """True for APPLY_GLOBAL actions that found a rule."""
        return self.decision is Decision.APPLY_GLOBAL and self.rule_index is not None


def first_matching_rule(rules: Sequence[PatternRule], job_name: str) -> int | None:
    """Return the index of the first rule matching job_name, or None.

    Rules after the first match are never evaluated.
    """
    for index, rule in enumerate(rules):
        if rule.matches(job_name):
            return index
    return None


def resolve(
    has_own_discarder: bool,
    mode: Any,
    rules: Sequence[PatternRule],
    job_name: str,
) -> Action:
    """Resolve the action for one job.

    Args:
        has_own_discarder: Whether the job defines its own discarder.
        mode: Policy mode configured for the job's category. Values outside
            the category's supported modes yield UNSUPPORTED_MODE.
        rules: Ordered global rules.
        job_name: Full name of the job.

    Returns:
        The Action to take. Never raises for unsupported modes.
    """
    if mode == PolicyMode.NONE:
        return Action(Decision.SKIP, mode)
    if mode == PolicyMode.USE_GLOBAL:
        return Action(Decision.APPLY_GLOBAL, mode, first_matching_rule(rules, job_name))
    if mode == PolicyMode.USE_OWN and has_own_discarder:
        return Action(Decision.APPLY_OWN, mode)
    return Action(Decision.UNSUPPORTED_MODE, mode)
