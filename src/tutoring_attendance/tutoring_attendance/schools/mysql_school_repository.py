from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import SchoolDirectory


class MySQLSchoolDirectory(SchoolDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def school_exists(self, school_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM schools WHERE school_id=%s", (school_id,))
            return fetchone(cur) is not None

    def class_exists(self, class_id: str) -> bool:
        return self.get_school_id_for_class(class_id) is not None

    def get_school_id_for_class(self, class_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT school_id FROM classes WHERE class_id=%s", (class_id,))
            r = fetchone(cur)
            return str(r["school_id"]) if r else None

    def list_active_student_ids(self, class_id: str, *, on: datetime) -> set[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id
                FROM students
                WHERE class_id=%s AND is_active=1 AND DATE(enrolled_at) <= DATE(%s)
                """,
                (class_id, on),
            )
            return {str(r["student_id"]) for r in fetchall(cur)}
