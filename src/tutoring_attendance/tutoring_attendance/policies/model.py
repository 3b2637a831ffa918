from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core import constants
from ..core.enums import PolicyScope


@dataclass(frozen=True)
class Policy:
    """Thực thể miền (domain): Chính sách điểm danh."""

    policy_id: str
    name: str
    scope: PolicyScope
    concern_threshold: int
    late_tolerance_minutes: int
    max_absences: int
    auto_excuse_enabled: bool
    effective_from: datetime
    auto_excuse_reasons: tuple[str, ...] = ()
    school_id: Optional[str] = None
    class_id: Optional[str] = None
    effective_to: Optional[datetime] = None
    description: Optional[str] = None

    def is_effective_at(self, at: datetime) -> bool:
        if self.effective_from > at:
            return False
        return self.effective_to is None or self.effective_to >= at

    def to_dict(self) -> dict:
        return {
            "id": self.policy_id,
            "name": self.name,
            "description": self.description,
            "scope": self.scope.value,
            "schoolId": self.school_id,
            "classId": self.class_id,
            "concernThreshold": self.concern_threshold,
            "lateToleranceMinutes": self.late_tolerance_minutes,
            "maxAbsences": self.max_absences,
            "autoExcuseEnabled": self.auto_excuse_enabled,
            "autoExcuseReasons": list(self.auto_excuse_reasons),
            "effectiveFrom": self.effective_from.isoformat(),
            "effectiveTo": self.effective_to.isoformat() if self.effective_to else None,
        }


@dataclass(frozen=True)
class PolicyDraft:
    """Input for publishing a new policy (not yet persisted, no id)."""

    name: str
    scope: PolicyScope
    concern_threshold: int
    late_tolerance_minutes: int
    max_absences: int
    auto_excuse_enabled: bool = False
    auto_excuse_reasons: tuple[str, ...] = ()
    school_id: Optional[str] = None
    class_id: Optional[str] = None
    effective_from: Optional[datetime] = None
    effective_to: Optional[datetime] = None
    description: Optional[str] = None


# Never persisted. Shared by every resolution so reports built without any
# administrator-defined policy stay reproducible.
DEFAULT_POLICY = Policy(
    policy_id=constants.DEFAULT_POLICY_ID,
    name=constants.DEFAULT_POLICY_NAME,
    description="System default values",
    scope=PolicyScope.GLOBAL,
    concern_threshold=constants.DEFAULT_CONCERN_THRESHOLD,
    late_tolerance_minutes=constants.DEFAULT_LATE_TOLERANCE_MINUTES,
    max_absences=constants.DEFAULT_MAX_ABSENCES,
    auto_excuse_enabled=False,
    auto_excuse_reasons=(),
    effective_from=datetime.min,
)
