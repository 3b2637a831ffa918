"""Ví dụ: dùng service layer trực tiếp (không qua Flask).

Ghi nhận một buổi học rồi xuất báo cáo điểm danh của tháng dưới dạng CSV.
"""

import importlib
from datetime import date, datetime

from config import get_settings_module

from src.tutoring_attendance.tutoring_attendance.container import build_container
from src.tutoring_attendance.tutoring_attendance.core.enums import ReportFormat


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    result = container.attendance_service.record_lesson(
        teacher_id="teacher-1",
        class_id="class-1",
        lesson_date=datetime(2024, 3, 4, 15, 30),
        hours_worked="1.5",
        submission={
            "student-1": "PRESENT",
            "student-2": {"status": "PRESENT", "arrivalMinutes": 20},
            "student-3": {"status": "ABSENT", "excuseReason": "Medical appointment"},
        },
    )
    for record in result.records:
        print(record.student_id, record.status.value, "|", record.notes)

    report = container.report_service.build_attendance_report(
        start=date(2024, 3, 1),
        end=date(2024, 3, 31),
        fmt=ReportFormat.CSV,
    )
    print(report.csv)


if __name__ == "__main__":
    main()
