from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/lessons", methods=["POST"], endpoint="create_lesson")
    def create_lesson():
        data = json_body()
        lesson_date = parse_iso_datetime(data.get("lessonDate"))
        if lesson_date is None:
            raise ValidationError("lessonDate is required")

        attendance = data.get("attendance") or {}
        if not isinstance(attendance, dict):
            raise ValidationError("attendance must be an object keyed by student id")

        result = container.attendance_service.record_lesson(
            teacher_id=data.get("teacherId") or "",
            class_id=data.get("classId") or "",
            lesson_date=lesson_date,
            hours_worked=data.get("hoursWorked"),
            submission=attendance,
            notes=data.get("notes"),
        )
        return jsonify({"message": "Lesson and attendance recorded", **result.to_dict()}), 201
