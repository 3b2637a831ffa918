from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow, Lesson


class AttendanceRepository(Protocol):
    def create_lesson_with_records(self, *, lesson: Lesson, records: Sequence[AttendanceRecord]) -> str:
        """Persist the lesson and all of its records in one transaction.

        Either everything is committed or nothing is. Returns lesson_id.
        """

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
