from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Sequence

from ..attendance.model import Lesson
from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import PaymentRecord, Teacher, WageRecord
from .repository import FinanceRepository


def _period(d: date) -> int:
    return d.year * 100 + d.month


def _to_wage(r: dict) -> WageRecord:
    return WageRecord(
        teacher_id=str(r["teacher_id"]),
        teacher_name=r.get("teacher_name") or "",
        teacher_email=r.get("teacher_email") or "",
        month=int(r["month"]),
        year=int(r["year"]),
        total_hours=to_decimal(r["total_hours"]),
        hourly_rate=to_decimal(r["hourly_rate"]),
        total_amount=to_decimal(r["total_amount"]),
        paid_amount=to_decimal(r["paid_amount"]),
        status=PaymentStatus(r["status"]),
        payment_date=r.get("payment_date"),
    )


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=str(r["teacher_id"]),
        full_name=f"{r['first_name']} {r['last_name']}",
        email=r["email"],
        hourly_rate=to_decimal(r["hourly_rate"]),
    )


class MySQLFinanceRepository(FinanceRepository):
    """Wage and payment reads filter on the record's (year, month) period."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_wage_records(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> Sequence[WageRecord]:
        sql = """
            SELECT w.teacher_id, CONCAT(t.first_name, ' ', t.last_name) AS teacher_name, t.email AS teacher_email,
                   w.month, w.year, w.total_hours, w.hourly_rate, w.total_amount, w.paid_amount,
                   w.status, w.payment_date
            FROM teacher_wage_records w
            JOIN teachers t ON t.teacher_id = w.teacher_id
            WHERE (w.year * 100 + w.month) BETWEEN %s AND %s
        """
        params: list = [_period(start_date), _period(end_date)]
        if teacher_id:
            sql += " AND w.teacher_id=%s"
            params.append(teacher_id)
        if school_id:
            sql += """
                AND EXISTS (
                    SELECT 1 FROM teacher_assignments ta
                    WHERE ta.teacher_id = w.teacher_id AND ta.school_id=%s AND ta.is_active=1
                )
            """
            params.append(school_id)
        sql += " ORDER BY w.year DESC, w.month DESC, w.teacher_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_wage(r) for r in fetchall(cur)]

    def list_payment_records(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
    ) -> Sequence[PaymentRecord]:
        sql = """
            SELECT p.school_id, s.name AS school_name, s.district, p.month, p.year,
                   p.agreed_amount, p.paid_amount, p.status, p.payment_date
            FROM school_payments p
            JOIN schools s ON s.school_id = p.school_id
            WHERE (p.year * 100 + p.month) BETWEEN %s AND %s
        """
        params: list = [_period(start_date), _period(end_date)]
        if school_id:
            sql += " AND p.school_id=%s"
            params.append(school_id)
        sql += " ORDER BY p.year DESC, p.month DESC, p.school_id"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                PaymentRecord(
                    school_id=str(r["school_id"]),
                    school_name=r.get("school_name") or "",
                    district=r.get("district") or "",
                    month=int(r["month"]),
                    year=int(r["year"]),
                    agreed_amount=to_decimal(r["agreed_amount"]),
                    paid_amount=to_decimal(r["paid_amount"]),
                    status=PaymentStatus(r["status"]),
                    payment_date=r.get("payment_date"),
                )
                for r in fetchall(cur)
            ]

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT teacher_id, first_name, last_name, email, hourly_rate FROM teachers WHERE teacher_id=%s",
                (teacher_id,),
            )
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def list_teachers(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, first_name, last_name, email, hourly_rate FROM teachers ORDER BY teacher_id")
            return [_to_teacher(r) for r in fetchall(cur)]

    def list_lessons_for_teacher(self, *, teacher_id: str, start_date: date, end_date: date) -> Sequence[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lesson_id, class_id, teacher_id, lesson_date, hours_worked, notes, is_cancelled
                FROM lessons
                WHERE teacher_id=%s AND lesson_date BETWEEN %s AND %s
                ORDER BY lesson_date
                """,
                (teacher_id, datetime.combine(start_date, time.min), datetime.combine(end_date, time.max)),
            )
            return [
                Lesson(
                    lesson_id=str(r["lesson_id"]),
                    class_id=str(r["class_id"]),
                    teacher_id=str(r["teacher_id"]),
                    lesson_date=r["lesson_date"],
                    hours_worked=to_decimal(r["hours_worked"]),
                    notes=r.get("notes"),
                    is_cancelled=bool(r["is_cancelled"]),
                )
                for r in fetchall(cur)
            ]

    def upsert_wage_record(self, record: WageRecord) -> WageRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teacher_wage_records(
                    teacher_id, month, year, total_hours, hourly_rate, total_amount, paid_amount, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total_hours=VALUES(total_hours),
                    hourly_rate=VALUES(hourly_rate),
                    total_amount=VALUES(total_amount)
                """,
                (
                    record.teacher_id,
                    record.month,
                    record.year,
                    record.total_hours,
                    record.hourly_rate,
                    record.total_amount,
                    record.paid_amount,
                    record.status.value,
                ),
            )
            cur.execute(
                """
                SELECT w.teacher_id, CONCAT(t.first_name, ' ', t.last_name) AS teacher_name, t.email AS teacher_email,
                       w.month, w.year, w.total_hours, w.hourly_rate, w.total_amount, w.paid_amount,
                       w.status, w.payment_date
                FROM teacher_wage_records w
                JOIN teachers t ON t.teacher_id = w.teacher_id
                WHERE w.teacher_id=%s AND w.month=%s AND w.year=%s
                """,
                (record.teacher_id, record.month, record.year),
            )
            r = fetchone(cur)
            return _to_wage(r) if r else record
