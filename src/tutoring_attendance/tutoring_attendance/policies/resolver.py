"""Effective policy resolution across CLASS, SCHOOL and GLOBAL scopes.

Candidates are matched against an ordered list of scope rules; the first rule
with an effective candidate wins, so adding a scope means adding a rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import PolicyScope
from ..core.exceptions import NotFoundError
from ..schools.repository import SchoolDirectory
from .model import DEFAULT_POLICY, Policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionTarget:
    class_id: str
    school_id: str


@dataclass(frozen=True)
class ScopeRule:
    scope: PolicyScope
    matches: Callable[[Policy, ResolutionTarget], bool]


DEFAULT_SCOPE_RULES: tuple[ScopeRule, ...] = (
    ScopeRule(PolicyScope.CLASS, lambda p, t: p.class_id == t.class_id),
    ScopeRule(PolicyScope.SCHOOL, lambda p, t: p.school_id == t.school_id),
    ScopeRule(PolicyScope.GLOBAL, lambda p, t: True),
)


def pick_effective(
    candidates: Iterable[Policy],
    target: ResolutionTarget,
    at: datetime,
    *,
    rules: Sequence[ScopeRule] = DEFAULT_SCOPE_RULES,
) -> Optional[Policy]:
    """Highest-precedence effective policy, or None.

    Within a scope the latest effective_from wins; exact ties fall back to the
    smallest id so the outcome never depends on candidate order.
    """

    effective = [p for p in candidates if p.is_effective_at(at)]
    for rule in rules:
        scoped = [p for p in effective if p.scope == rule.scope and rule.matches(p, target)]
        if scoped:
            # max() keeps the first maximal item, so pre-sorting by id breaks ties.
            return max(sorted(scoped, key=lambda p: p.policy_id), key=lambda p: p.effective_from)
    return None


class PolicyResolver:
    def __init__(
        self,
        policies: PolicyRepository,
        directory: SchoolDirectory,
        *,
        rules: Sequence[ScopeRule] = DEFAULT_SCOPE_RULES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._policies = policies
        self._directory = directory
        self._rules = tuple(rules)
        self._clock = clock

    def resolve(self, class_id: str, school_id: str, at: Optional[datetime] = None) -> Policy:
        if not self._directory.class_exists(class_id):
            raise NotFoundError(f"Class not found: {class_id}")
        if not self._directory.school_exists(school_id):
            raise NotFoundError(f"School not found: {school_id}")

        at = at or self._clock()
        target = ResolutionTarget(class_id=class_id, school_id=school_id)
        candidates = self._policies.list_candidate_policies(class_id, school_id)

        policy = pick_effective(candidates, target, at, rules=self._rules)
        if policy is None:
            logger.debug("No policy effective for class=%s school=%s at %s; using default", class_id, school_id, at)
            return DEFAULT_POLICY
        return policy
