from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import AttendanceStatus
from ..policies.model import Policy
from .model import AttendanceObservation
from .strategies.base import ClassificationStrategy
from .strategies.excuse_strategy import AutoExcuseStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import OnTimeStrategy


@dataclass
class ClassificationStrategyFactory:
    """Factory Pattern: choose which strategies apply based on policy rules."""

    excuse_strategy: ClassificationStrategy = field(default_factory=AutoExcuseStrategy)

    def for_arrival(self, *, observation: AttendanceObservation, policy: Policy) -> Optional[ClassificationStrategy]:
        minutes = observation.arrival_minutes
        # Zero and negative minutes carry no lateness information.
        if minutes is None or minutes <= 0:
            return None
        if minutes > policy.late_tolerance_minutes:
            return LateStrategy()
        return OnTimeStrategy()

    def for_excuse(
        self,
        *,
        current: AttendanceStatus,
        observation: AttendanceObservation,
        policy: Policy,
    ) -> Optional[ClassificationStrategy]:
        if not policy.auto_excuse_enabled or current != AttendanceStatus.ABSENT:
            return None
        if not observation.excuse_reason_text:
            return None
        return self.excuse_strategy
