from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional

from ..common.validators import require_int_range
from ..core.constants import MIN_WAGE_YEAR
from ..core.exceptions import NotFoundError
from .calculator.base import WageCalculator
from .calculator.standard_calculator import StandardWageCalculator
from .model import WageRecord
from .repository import FinanceRepository

logger = logging.getLogger(__name__)


class WageService:
    def __init__(self, finance: FinanceRepository, *, calculator: Optional[WageCalculator] = None):
        self._finance = finance
        self._calculator = calculator or StandardWageCalculator()

    def calculate_month(self, *, month: int, year: int, teacher_id: Optional[str] = None) -> list[WageRecord]:
        """(Re)compute monthly wages for one teacher, or for every teacher."""

        month = require_int_range(month, "Month", min_value=1, max_value=12)
        year = require_int_range(year, "Year", min_value=MIN_WAGE_YEAR)

        if teacher_id:
            teacher = self._finance.get_teacher(teacher_id)
            if not teacher:
                raise NotFoundError(f"Teacher not found: {teacher_id}")
            teachers = [teacher]
        else:
            teachers = list(self._finance.list_teachers())

        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])

        results: list[WageRecord] = []
        for teacher in teachers:
            lessons = self._finance.list_lessons_for_teacher(teacher_id=teacher.teacher_id, start_date=start, end_date=end)
            record = self._calculator.build_wage_record(teacher=teacher, month=month, year=year, lessons=lessons)
            results.append(self._finance.upsert_wage_record(record))

        logger.info("Calculated wages for %d teacher(s) for %02d/%d", len(results), month, year)
        return results
