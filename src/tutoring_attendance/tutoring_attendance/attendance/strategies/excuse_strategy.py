from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...policies.model import Policy
from ..matching import ContainmentReasonMatcher, ReasonMatcher
from ..model import AttendanceObservation
from .base import ClassificationStrategy, StatusDecision


class AutoExcuseStrategy(ClassificationStrategy):
    """Absence whose reason matches one of the policy's auto-excuse reasons."""

    def __init__(self, matcher: ReasonMatcher | None = None):
        self._matcher = matcher or ContainmentReasonMatcher()

    def decide(self, *, current: AttendanceStatus, observation: AttendanceObservation, policy: Policy) -> StatusDecision:
        reason = observation.excuse_reason_text or ""
        matched = self._matcher.find_match(reason, policy.auto_excuse_reasons)
        if matched is None:
            return StatusDecision(status=current)
        return StatusDecision(
            status=AttendanceStatus.EXCUSED,
            rule=f'Auto-excused: "{reason}" matches policy reason "{matched}"',
        )
