from __future__ import annotations

from typing import Iterable

from ...attendance.model import Lesson
from ...common.numbers import ZERO
from ...common.validators import require_int_range
from ...core.constants import MIN_WAGE_YEAR
from ...core.enums import PaymentStatus
from ..model import Teacher, WageRecord
from .base import WageCalculator


class StandardWageCalculator(WageCalculator):
    """Standard rule: hours of the teacher's non-cancelled lessons in the month x hourly rate."""

    def build_wage_record(self, *, teacher: Teacher, month: int, year: int, lessons: Iterable[Lesson]) -> WageRecord:
        month = require_int_range(month, "Month", min_value=1, max_value=12)
        year = require_int_range(year, "Year", min_value=MIN_WAGE_YEAR)

        total_hours = sum(
            (
                lesson.hours_worked
                for lesson in lessons
                if lesson.teacher_id == teacher.teacher_id
                and not lesson.is_cancelled
                and lesson.lesson_date.year == year
                and lesson.lesson_date.month == month
            ),
            ZERO,
        )
        return WageRecord(
            teacher_id=teacher.teacher_id,
            teacher_name=teacher.full_name,
            teacher_email=teacher.email,
            month=month,
            year=year,
            total_hours=total_hours,
            hourly_rate=teacher.hourly_rate,
            total_amount=total_hours * teacher.hourly_rate,
            paid_amount=ZERO,
            status=PaymentStatus.PENDING,
        )
