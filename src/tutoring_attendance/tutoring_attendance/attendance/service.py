from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_decimal, require_enum, require_int, require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..policies.model import Policy
from ..policies.resolver import PolicyResolver
from ..schools.repository import SchoolDirectory
from .classifier import AttendanceClassifier
from .model import AttendanceObservation, AttendanceRecord, Lesson
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LessonResult:
    lesson: Lesson
    policy: Policy
    records: tuple[AttendanceRecord, ...]
    dropped_student_ids: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "lesson": {
                "id": self.lesson.lesson_id,
                "classId": self.lesson.class_id,
                "teacherId": self.lesson.teacher_id,
                "date": self.lesson.lesson_date.isoformat(),
                "hoursWorked": self.lesson.hours_worked,
                "notes": self.lesson.notes or "",
            },
            "policy": {"id": self.policy.policy_id, "name": self.policy.name},
            "attendance": [
                {
                    "studentId": r.student_id,
                    "status": r.status.value,
                    "appliedRules": list(r.applied_rules),
                    "notes": r.notes,
                }
                for r in self.records
            ],
            "droppedStudentIds": list(self.dropped_student_ids),
        }


def parse_submission(lesson_id: str, submission: Mapping[str, Any]) -> list[AttendanceObservation]:
    """Validate a raw {studentId: entry} mapping before anything is classified.

    An entry is either a bare status string or an object with ``status`` and
    optional ``arrivalMinutes`` / ``excuseReason``. Negative minutes are kept;
    the classifier ignores them.
    """

    observations: list[AttendanceObservation] = []
    for student_id, entry in submission.items():
        student_id = require_non_empty(student_id, "Student id")
        if isinstance(entry, Mapping):
            raw_status = entry.get("status")
            raw_minutes = entry.get("arrivalMinutes")
            reason = entry.get("excuseReason") or entry.get("excuseReasonText")
        else:
            raw_status, raw_minutes, reason = entry, None, None

        status = require_enum(AttendanceStatus, raw_status, f"Status for student {student_id}")
        minutes = None
        if raw_minutes is not None:
            minutes = require_int(raw_minutes, f"Arrival minutes for student {student_id}")
        if reason is not None and not isinstance(reason, str):
            raise ValidationError(f"Excuse reason for student {student_id} must be text")

        observations.append(
            AttendanceObservation(
                student_id=student_id,
                lesson_id=lesson_id,
                status=status,
                arrival_minutes=minutes,
                excuse_reason_text=reason,
            )
        )
    return observations


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: SchoolDirectory,
        resolver: PolicyResolver,
        *,
        classifier: Optional[AttendanceClassifier] = None,
        clock: Callable[[], datetime] = now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._attendance = attendance
        self._directory = directory
        self._resolver = resolver
        self._classifier = classifier or AttendanceClassifier()
        self._clock = clock
        self._new_id = id_factory

    def record_lesson(
        self,
        *,
        teacher_id: str,
        class_id: str,
        lesson_date: datetime,
        hours_worked: Any,
        submission: Optional[Mapping[str, Any]] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LessonResult:
        """Create a lesson and its classified attendance as one atomic write."""

        teacher_id = require_non_empty(teacher_id, "Teacher id")
        class_id = require_non_empty(class_id, "Class id")
        hours = require_decimal(hours_worked, "Hours worked", positive=True)
        if not isinstance(lesson_date, datetime):
            lesson_date = datetime.combine(lesson_date, time())

        lesson_id = self._new_id()
        observations = parse_submission(lesson_id, submission or {})

        school_id = self._directory.get_school_id_for_class(class_id)
        if school_id is None:
            raise NotFoundError(f"Class not found: {class_id}")

        now = now or self._clock()
        policy = self._resolver.resolve(class_id, school_id, now)
        roster = self._directory.list_active_student_ids(class_id, on=lesson_date)
        batch = self._classifier.classify_batch(observations, roster=roster, policy=policy)
        if batch.dropped_student_ids:
            logger.warning(
                "Invalid student IDs submitted for class %s: %s",
                class_id,
                ", ".join(batch.dropped_student_ids),
            )

        lesson = Lesson(
            lesson_id=lesson_id,
            class_id=class_id,
            teacher_id=teacher_id,
            lesson_date=lesson_date,
            hours_worked=hours,
            notes=(notes or "").strip() or None,
        )
        self._attendance.create_lesson_with_records(lesson=lesson, records=batch.records)
        logger.info("Recorded lesson %s for class %s with %d attendance records", lesson_id, class_id, len(batch.records))

        return LessonResult(
            lesson=lesson,
            policy=policy,
            records=batch.records,
            dropped_student_ids=batch.dropped_student_ids,
        )

    def rederive(self, lesson: Lesson, observations: Iterable[AttendanceObservation]) -> Sequence[AttendanceRecord]:
        """Reclassify a past lesson under the policy and roster in force on its date. Writes nothing."""

        school_id = self._directory.get_school_id_for_class(lesson.class_id)
        if school_id is None:
            raise NotFoundError(f"Class not found: {lesson.class_id}")
        policy = self._resolver.resolve(lesson.class_id, school_id, lesson.lesson_date)
        roster = self._directory.list_active_student_ids(lesson.class_id, on=lesson.lesson_date)
        batch = self._classifier.classify_batch(observations, roster=roster, policy=policy)
        if batch.dropped_student_ids:
            logger.warning(
                "Skipping students not on the roster of class %s for lesson %s: %s",
                lesson.class_id,
                lesson.lesson_id,
                ", ".join(batch.dropped_student_ids),
            )
        return list(batch.records)
