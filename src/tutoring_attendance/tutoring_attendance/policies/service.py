from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_int_range, require_non_empty
from ..core import constants
from ..core.enums import PolicyScope
from ..core.exceptions import NotFoundError, ValidationError
from ..schools.repository import SchoolDirectory
from .model import Policy, PolicyDraft
from .repository import PolicyRepository
from .resolver import PolicyResolver

logger = logging.getLogger(__name__)


class PolicyService:
    """Use case: publish policies and look up the effective one."""

    def __init__(
        self,
        policies: PolicyRepository,
        directory: SchoolDirectory,
        resolver: PolicyResolver,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._policies = policies
        self._directory = directory
        self._resolver = resolver
        self._clock = clock

    @staticmethod
    def validate(draft: PolicyDraft) -> PolicyDraft:
        name = require_non_empty(draft.name, "Policy name")
        require_int_range(draft.concern_threshold, "Concern threshold", min_value=0, max_value=100)
        require_int_range(
            draft.late_tolerance_minutes,
            "Late tolerance",
            min_value=0,
            max_value=constants.MAX_LATE_TOLERANCE_MINUTES,
        )
        require_int_range(draft.max_absences, "Max absences", min_value=0, max_value=constants.MAX_ABSENCES_LIMIT)

        if draft.scope == PolicyScope.SCHOOL and not draft.school_id:
            raise ValidationError("A school policy requires a school")
        if draft.scope == PolicyScope.CLASS and (not draft.class_id or not draft.school_id):
            raise ValidationError("A class policy requires both a class and a school")
        if draft.scope == PolicyScope.GLOBAL and (draft.school_id or draft.class_id):
            raise ValidationError("A global policy cannot be bound to a school or class")
        if draft.scope == PolicyScope.SCHOOL and draft.class_id:
            raise ValidationError("A school policy cannot be bound to a class")

        if draft.effective_from and draft.effective_to and draft.effective_to < draft.effective_from:
            raise ValidationError("effectiveTo cannot be earlier than effectiveFrom")

        reasons = tuple(r.strip() for r in draft.auto_excuse_reasons if r and r.strip())
        return PolicyDraft(
            name=name,
            description=(draft.description or "").strip() or None,
            scope=draft.scope,
            school_id=draft.school_id,
            class_id=draft.class_id,
            concern_threshold=int(draft.concern_threshold),
            late_tolerance_minutes=int(draft.late_tolerance_minutes),
            max_absences=int(draft.max_absences),
            auto_excuse_enabled=bool(draft.auto_excuse_enabled),
            auto_excuse_reasons=reasons,
            effective_from=draft.effective_from,
            effective_to=draft.effective_to,
        )

    def publish(self, draft: PolicyDraft, *, now: Optional[datetime] = None) -> Policy:
        """Create a policy, retiring the open-ended one it replaces.

        Policies are never deleted; the previous policy for the same scope target
        gets effective_to = now so historical reports can still resolve it.
        """

        now = now or self._clock()
        draft = self.validate(draft)

        if draft.school_id and not self._directory.school_exists(draft.school_id):
            raise NotFoundError(f"School not found: {draft.school_id}")
        if draft.class_id and not self._directory.class_exists(draft.class_id):
            raise NotFoundError(f"Class not found: {draft.class_id}")

        existing = self._policies.find_open_policy(
            scope=draft.scope,
            school_id=draft.school_id,
            class_id=draft.class_id,
        )
        policy = self._policies.replace_open_policy(
            draft=draft,
            effective_from=draft.effective_from or now,
            retire_policy_id=existing.policy_id if existing else None,
            retire_at=now,
        )
        if existing:
            logger.info("Retired policy %s (%s) superseded by %s", existing.policy_id, existing.scope.value, policy.policy_id)
        logger.info("Published policy %s (%s)", policy.policy_id, policy.scope.value)
        return policy

    def list_policies(self) -> Sequence[Policy]:
        return self._policies.list_all()

    def effective_policy(self, *, class_id: str, school_id: Optional[str] = None, at: Optional[datetime] = None) -> Policy:
        if school_id is None:
            school_id = self._directory.get_school_id_for_class(class_id)
            if school_id is None:
                raise NotFoundError(f"Class not found: {class_id}")
        return self._resolver.resolve(class_id, school_id, at)
