from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..attendance.model import Lesson
from .model import PaymentRecord, Teacher, WageRecord


class FinanceRepository(Protocol):
    def list_wage_records(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[WageRecord]:
        raise NotImplementedError

    def list_payment_records(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
    ) -> Sequence[PaymentRecord]:
        raise NotImplementedError

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def list_lessons_for_teacher(self, *, teacher_id: str, start_date: date, end_date: date) -> Sequence[Lesson]:
        raise NotImplementedError

    def list_teachers(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def upsert_wage_record(self, record: WageRecord) -> WageRecord:
        """Insert, or refresh hours/rate/amount of the (teacher, month, year) record.

        Paid amount and status of an existing record are kept.
        """

        raise NotImplementedError
