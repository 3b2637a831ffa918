from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...policies.model import Policy
from ..model import AttendanceObservation
from .base import ClassificationStrategy, StatusDecision


class LateStrategy(ClassificationStrategy):
    """Arrival after the policy's late tolerance."""

    def decide(self, *, current: AttendanceStatus, observation: AttendanceObservation, policy: Policy) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            rule=f"Late: {observation.arrival_minutes}min > {policy.late_tolerance_minutes}min tolerance",
        )
