"""Per-student, per-class and per-school attendance rollups.

Rows are folded once into accumulators keyed by id; outputs are emitted sorted by
id so results never depend on the order rows arrive in.

Rates:
  entity rate  = (present + late + excused) / total * 100
  overall rate = (present + late) / total * 100
both rounded half-up to 2 places.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from ..attendance.model import AttendanceReportRow
from ..common.datetime_utils import now_local
from ..common.numbers import percentage
from ..core.enums import AttendanceStatus
from ..policies.model import Policy
from ..policies.resolver import PolicyResolver


@dataclass
class StatusTally:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0

    def add(self, status: AttendanceStatus) -> None:
        if status == AttendanceStatus.PRESENT:
            self.present += 1
        elif status == AttendanceStatus.ABSENT:
            self.absent += 1
        elif status == AttendanceStatus.LATE:
            self.late += 1
        else:
            self.excused += 1

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late + self.excused

    @property
    def attendance_rate(self) -> Decimal:
        return percentage(self.present + self.late + self.excused, self.total)

    def counts(self) -> dict:
        return {"present": self.present, "absent": self.absent, "late": self.late, "excused": self.excused}


@dataclass
class _StudentAcc:
    student_id: str
    student_name: str = ""
    class_id: str = ""
    class_name: str = ""
    school_id: str = ""
    school_name: str = ""
    latest: tuple = ()
    tally: StatusTally = field(default_factory=StatusTally)


@dataclass
class _ClassAcc:
    class_id: str
    class_name: str = ""
    school_id: str = ""
    school_name: str = ""
    student_ids: set = field(default_factory=set)
    tally: StatusTally = field(default_factory=StatusTally)


@dataclass
class _SchoolAcc:
    school_id: str
    school_name: str = ""
    student_ids: set = field(default_factory=set)
    class_ids: set = field(default_factory=set)
    tally: StatusTally = field(default_factory=StatusTally)


@dataclass(frozen=True)
class StudentRollup:
    student_id: str
    student_name: str
    class_id: str
    class_name: str
    school_id: str
    school_name: str
    total_lessons: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: Decimal


@dataclass(frozen=True)
class ClassRollup:
    class_id: str
    class_name: str
    school_id: str
    school_name: str
    total_students: int
    total_lessons: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: Decimal


@dataclass(frozen=True)
class SchoolRollup:
    school_id: str
    school_name: str
    total_students: int
    total_classes: int
    total_lessons: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: Decimal


@dataclass(frozen=True)
class ConcernStudent:
    student: StudentRollup
    policy_id: str
    policy_applied: str
    concern_threshold: int


@dataclass(frozen=True)
class AbsenceWarning:
    student: StudentRollup
    policy_id: str
    policy_applied: str
    max_absences: int


@dataclass(frozen=True)
class RollupSummary:
    total_records: int
    total_students: int
    total_classes: int
    total_schools: int
    students_with_concerns: int
    overall_attendance_rate: Decimal


@dataclass(frozen=True)
class RollupResult:
    by_student: tuple[StudentRollup, ...]
    by_class: tuple[ClassRollup, ...]
    by_school: tuple[SchoolRollup, ...]
    concern_students: tuple[ConcernStudent, ...]
    absence_warnings: tuple[AbsenceWarning, ...]
    summary: RollupSummary


class RollupAggregator:
    def __init__(self, resolver: PolicyResolver, *, clock: Callable[[], datetime] = now_local):
        self._resolver = resolver
        self._clock = clock

    def aggregate(self, rows: Iterable[AttendanceReportRow], *, at: Optional[datetime] = None) -> RollupResult:
        """Fold classified rows into rollups and flag concern students.

        Concern thresholds come from the policy resolved *now* (``at``) for the
        student's class, not the policy stored on each record, so historical
        attendance is graded under the rules in force at report time.
        """

        at = at or self._clock()
        students: dict[str, _StudentAcc] = {}
        classes: dict[str, _ClassAcc] = {}
        schools: dict[str, _SchoolAcc] = {}
        overall = StatusTally()

        for row in rows:
            overall.add(row.status)

            s = students.get(row.student_id)
            if s is None:
                s = students[row.student_id] = _StudentAcc(student_id=row.student_id)
            s.tally.add(row.status)
            key = (row.lesson_date, row.lesson_id)
            if not s.latest or key > s.latest:
                s.latest = key
                s.student_name = row.student_name
                s.class_id, s.class_name = row.class_id, row.class_name
                s.school_id, s.school_name = row.school_id, row.school_name

            c = classes.get(row.class_id)
            if c is None:
                c = classes[row.class_id] = _ClassAcc(
                    class_id=row.class_id,
                    class_name=row.class_name,
                    school_id=row.school_id,
                    school_name=row.school_name,
                )
            c.student_ids.add(row.student_id)
            c.tally.add(row.status)

            sc = schools.get(row.school_id)
            if sc is None:
                sc = schools[row.school_id] = _SchoolAcc(school_id=row.school_id, school_name=row.school_name)
            sc.student_ids.add(row.student_id)
            sc.class_ids.add(row.class_id)
            sc.tally.add(row.status)

        by_student = tuple(self._student_rollup(students[k]) for k in sorted(students))
        by_class = tuple(self._class_rollup(classes[k]) for k in sorted(classes))
        by_school = tuple(self._school_rollup(schools[k]) for k in sorted(schools))

        concerns, warnings = self._detect_concerns(by_student, at)

        summary = RollupSummary(
            total_records=overall.total,
            total_students=len(by_student),
            total_classes=len(by_class),
            total_schools=len(by_school),
            students_with_concerns=len(concerns),
            overall_attendance_rate=percentage(overall.present + overall.late, overall.total),
        )
        return RollupResult(
            by_student=by_student,
            by_class=by_class,
            by_school=by_school,
            concern_students=concerns,
            absence_warnings=warnings,
            summary=summary,
        )

    def _detect_concerns(
        self,
        students: Iterable[StudentRollup],
        at: datetime,
    ) -> tuple[tuple[ConcernStudent, ...], tuple[AbsenceWarning, ...]]:
        resolved: dict[tuple[str, str], Policy] = {}
        concerns: list[ConcernStudent] = []
        warnings: list[AbsenceWarning] = []

        for student in students:
            if student.total_lessons == 0:
                continue

            target = (student.class_id, student.school_id)
            policy = resolved.get(target)
            if policy is None:
                policy = resolved[target] = self._resolver.resolve(student.class_id, student.school_id, at)

            if student.attendance_rate < policy.concern_threshold:
                concerns.append(
                    ConcernStudent(
                        student=student,
                        policy_id=policy.policy_id,
                        policy_applied=policy.name,
                        concern_threshold=policy.concern_threshold,
                    )
                )
            if student.absent > policy.max_absences:
                warnings.append(
                    AbsenceWarning(
                        student=student,
                        policy_id=policy.policy_id,
                        policy_applied=policy.name,
                        max_absences=policy.max_absences,
                    )
                )
        return tuple(concerns), tuple(warnings)

    @staticmethod
    def _student_rollup(acc: _StudentAcc) -> StudentRollup:
        return StudentRollup(
            student_id=acc.student_id,
            student_name=acc.student_name,
            class_id=acc.class_id,
            class_name=acc.class_name,
            school_id=acc.school_id,
            school_name=acc.school_name,
            total_lessons=acc.tally.total,
            attendance_rate=acc.tally.attendance_rate,
            **acc.tally.counts(),
        )

    @staticmethod
    def _class_rollup(acc: _ClassAcc) -> ClassRollup:
        return ClassRollup(
            class_id=acc.class_id,
            class_name=acc.class_name,
            school_id=acc.school_id,
            school_name=acc.school_name,
            total_students=len(acc.student_ids),
            total_lessons=acc.tally.total,
            attendance_rate=acc.tally.attendance_rate,
            **acc.tally.counts(),
        )

    @staticmethod
    def _school_rollup(acc: _SchoolAcc) -> SchoolRollup:
        return SchoolRollup(
            school_id=acc.school_id,
            school_name=acc.school_name,
            total_students=len(acc.student_ids),
            total_classes=len(acc.class_ids),
            total_lessons=acc.tally.total,
            attendance_rate=acc.tally.attendance_rate,
            **acc.tally.counts(),
        )
