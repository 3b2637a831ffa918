from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import Lesson
from ..model import Teacher, WageRecord


class WageCalculator(ABC):
    """Calculator interface (Strategy Pattern for teacher wages)."""

    @abstractmethod
    def build_wage_record(self, *, teacher: Teacher, month: int, year: int, lessons: Iterable[Lesson]) -> WageRecord:
        raise NotImplementedError
