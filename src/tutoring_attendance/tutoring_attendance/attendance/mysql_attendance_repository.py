from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall
from .model import AttendanceRecord, AttendanceReportRow, Lesson
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_lesson_with_records(self, *, lesson: Lesson, records: Sequence[AttendanceRecord]) -> str:
        # Single db_cursor block = single transaction for the lesson and all its records.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lessons(lesson_id, class_id, teacher_id, lesson_date, hours_worked, notes, is_cancelled)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    lesson.lesson_id,
                    lesson.class_id,
                    lesson.teacher_id,
                    lesson.lesson_date,
                    lesson.hours_worked,
                    lesson.notes,
                    int(lesson.is_cancelled),
                ),
            )
            if records:
                cur.executemany(
                    """
                    INSERT INTO attendance_records(lesson_id, student_id, status, policy_id, applied_rules, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            r.lesson_id,
                            r.student_id,
                            r.status.value,
                            r.policy_id,
                            dump_json_list(r.applied_rules),
                            r.notes,
                        )
                        for r in records
                    ],
                )
        return lesson.lesson_id

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        school_id: Optional[str] = None,
        class_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        sql = """
            SELECT a.lesson_id, l.lesson_date, a.student_id,
                   CONCAT(s.first_name, ' ', s.last_name) AS student_name,
                   c.class_id, c.name AS class_name,
                   sc.school_id, sc.name AS school_name,
                   CONCAT(t.first_name, ' ', t.last_name) AS teacher_name,
                   a.status, a.notes
            FROM attendance_records a
            JOIN lessons l ON l.lesson_id = a.lesson_id
            JOIN students s ON s.student_id = a.student_id
            JOIN classes c ON c.class_id = s.class_id
            JOIN schools sc ON sc.school_id = c.school_id
            JOIN teachers t ON t.teacher_id = l.teacher_id
            WHERE l.lesson_date BETWEEN %s AND %s
        """
        params: list = [datetime.combine(start_date, time.min), datetime.combine(end_date, time.max)]
        if school_id:
            sql += " AND c.school_id=%s"
            params.append(school_id)
        if class_id:
            sql += " AND l.class_id=%s"
            params.append(class_id)
        sql += " ORDER BY l.lesson_date DESC, s.last_name ASC, a.student_id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceReportRow(
                    lesson_id=str(r["lesson_id"]),
                    lesson_date=r["lesson_date"],
                    student_id=str(r["student_id"]),
                    student_name=r["student_name"],
                    class_id=str(r["class_id"]),
                    class_name=r["class_name"],
                    school_id=str(r["school_id"]),
                    school_name=r["school_name"],
                    teacher_name=r["teacher_name"],
                    status=AttendanceStatus(r["status"]),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
