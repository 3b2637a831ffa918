from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ...policies.model import Policy
from ..model import AttendanceObservation


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    rule: Optional[str] = None


class ClassificationStrategy(ABC):
    """Strategy Pattern: encapsulate one step that may override the attendance status."""

    @abstractmethod
    def decide(
        self,
        *,
        current: AttendanceStatus,
        observation: AttendanceObservation,
        policy: Policy,
    ) -> StatusDecision:
        raise NotImplementedError
