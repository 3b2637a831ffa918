from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceObservation:
    """Raw entry as submitted by the teacher for one student in one lesson."""

    student_id: str
    lesson_id: str
    status: AttendanceStatus
    arrival_minutes: Optional[int] = None
    excuse_reason_text: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh sau khi phân loại."""

    student_id: str
    lesson_id: str
    status: AttendanceStatus
    policy_id: str
    applied_rules: tuple[str, ...] = ()
    notes: str = ""


@dataclass(frozen=True)
class Lesson:
    lesson_id: str
    class_id: str
    teacher_id: str
    lesson_date: datetime
    hours_worked: Decimal
    notes: Optional[str] = None
    is_cancelled: bool = False


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model phục vụ báo cáo/xuất file (tối ưu cho truy vấn)."""

    lesson_id: str
    lesson_date: datetime
    student_id: str
    student_name: str
    class_id: str
    class_name: str
    school_id: str
    school_name: str
    teacher_name: str
    status: AttendanceStatus
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "lessonId": self.lesson_id,
            "lessonDate": self.lesson_date.isoformat(),
            "studentId": self.student_id,
            "studentName": self.student_name,
            "classId": self.class_id,
            "className": self.class_name,
            "schoolId": self.school_id,
            "schoolName": self.school_name,
            "teacherName": self.teacher_name,
            "status": self.status.value,
            "notes": self.notes or "",
        }
