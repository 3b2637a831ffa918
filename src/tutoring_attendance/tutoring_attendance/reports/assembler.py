from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence

from ..attendance.model import AttendanceReportRow
from ..common.numbers import round_money
from ..finance.aggregator import FinancialAnalytics, FinancialSummary, PaymentAnalytics, WageAnalytics
from ..finance.model import PaymentRecord, WageRecord
from .rollup import (
    AbsenceWarning,
    ClassRollup,
    ConcernStudent,
    RollupResult,
    SchoolRollup,
    StudentRollup,
)

ATTENDANCE_CSV_HEADERS = ["Date", "Student Name", "Class", "School", "Status", "Teacher", "Notes"]
WAGE_CSV_HEADERS = [
    "Teacher Name",
    "Email",
    "Month",
    "Year",
    "Total Hours",
    "Hourly Rate",
    "Total Amount",
    "Paid Amount",
    "Status",
    "Payment Date",
]
PAYMENT_CSV_HEADERS = [
    "School Name",
    "District",
    "Month",
    "Year",
    "Agreed Amount",
    "Paid Amount",
    "Status",
    "Payment Date",
]
SUMMARY_CSV_HEADERS = ["Type", "Description", "Amount", "Status", "Details"]


@dataclass(frozen=True)
class ReportMetadata:
    report_type: str
    start: date
    end: date
    generated_at: datetime
    generated_by: Optional[str]
    filters: dict = field(default_factory=dict)
    sub_type: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "reportType": self.report_type,
            "dateRange": {"start": self.start.isoformat(), "end": self.end.isoformat()},
            "generatedAt": self.generated_at.isoformat(),
            "generatedBy": self.generated_by,
            "filters": dict(self.filters),
        }
        if self.sub_type:
            out["subType"] = self.sub_type
        return out


@dataclass(frozen=True)
class AttendanceReport:
    metadata: ReportMetadata
    rollup: RollupResult
    raw_data: Optional[tuple[AttendanceReportRow, ...]] = None

    def to_dict(self) -> dict:
        s = self.rollup.summary
        return {
            "metadata": self.metadata.to_dict(),
            "summary": {
                "totalRecords": s.total_records,
                "totalStudents": s.total_students,
                "totalClasses": s.total_classes,
                "totalSchools": s.total_schools,
                "studentsWithConcerns": s.students_with_concerns,
                "overallAttendanceRate": s.overall_attendance_rate,
            },
            "analytics": {
                "byStudent": [_student_dict(r) for r in self.rollup.by_student],
                "byClass": [_class_dict(r) for r in self.rollup.by_class],
                "bySchool": [_school_dict(r) for r in self.rollup.by_school],
                "concernStudents": [_concern_dict(c) for c in self.rollup.concern_students],
                "absenceWarnings": [_warning_dict(w) for w in self.rollup.absence_warnings],
            },
            "rawData": [r.to_dict() for r in self.raw_data] if self.raw_data is not None else None,
        }


@dataclass(frozen=True)
class FinancialReport:
    metadata: ReportMetadata
    analytics: FinancialAnalytics
    wage_records: Optional[tuple[WageRecord, ...]] = None
    payment_records: Optional[tuple[PaymentRecord, ...]] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"metadata": self.metadata.to_dict()}
        if self.analytics.wage_analytics is not None:
            out["wageData"] = {
                "analytics": _wage_analytics_dict(self.analytics.wage_analytics),
                "records": [r.to_dict() for r in self.wage_records or ()],
            }
        if self.analytics.payment_analytics is not None:
            out["paymentData"] = {
                "analytics": _payment_analytics_dict(self.analytics.payment_analytics),
                "records": [r.to_dict() for r in self.payment_records or ()],
            }
        if self.analytics.summary is not None:
            out["summary"] = _summary_dict(self.analytics.summary)
        return out


def _rollup_counts(r) -> dict:
    return {
        "totalLessons": r.total_lessons,
        "present": r.present,
        "absent": r.absent,
        "late": r.late,
        "excused": r.excused,
        "attendanceRate": r.attendance_rate,
    }


def _student_dict(r: StudentRollup) -> dict:
    return {
        "studentId": r.student_id,
        "studentName": r.student_name,
        "classId": r.class_id,
        "className": r.class_name,
        "schoolId": r.school_id,
        "schoolName": r.school_name,
        **_rollup_counts(r),
    }


def _class_dict(r: ClassRollup) -> dict:
    return {
        "classId": r.class_id,
        "className": r.class_name,
        "schoolId": r.school_id,
        "schoolName": r.school_name,
        "totalStudents": r.total_students,
        **_rollup_counts(r),
    }


def _school_dict(r: SchoolRollup) -> dict:
    return {
        "schoolId": r.school_id,
        "schoolName": r.school_name,
        "totalStudents": r.total_students,
        "totalClasses": r.total_classes,
        **_rollup_counts(r),
    }


def _concern_dict(c: ConcernStudent) -> dict:
    return {
        **_student_dict(c.student),
        "policyId": c.policy_id,
        "policyApplied": c.policy_applied,
        "concernThreshold": c.concern_threshold,
        "isConcern": True,
    }


def _warning_dict(w: AbsenceWarning) -> dict:
    return {
        **_student_dict(w.student),
        "policyId": w.policy_id,
        "policyApplied": w.policy_applied,
        "maxAbsences": w.max_absences,
    }


def _wage_analytics_dict(a: WageAnalytics) -> dict:
    return {
        "totalWages": round_money(a.total_wages),
        "totalPaid": round_money(a.total_paid),
        "totalPending": round_money(a.total_pending),
        "totalOverdue": round_money(a.total_overdue),
        "totalHours": round_money(a.total_hours),
        "averageHourlyRate": round_money(a.average_hourly_rate),
        "recordCount": a.record_count,
        "teacherCount": a.teacher_count,
    }


def _payment_analytics_dict(a: PaymentAnalytics) -> dict:
    return {
        "totalRevenue": round_money(a.total_revenue),
        "totalReceived": round_money(a.total_received),
        "totalPending": round_money(a.total_pending),
        "totalOverdue": round_money(a.total_overdue),
        "averagePayment": round_money(a.average_payment),
        "recordCount": a.record_count,
        "schoolCount": a.school_count,
    }


def _summary_dict(s: FinancialSummary) -> dict:
    return {
        "totalIncome": round_money(s.total_income),
        "totalExpenses": round_money(s.total_expenses),
        "netResult": round_money(s.net_result),
        "netMargin": round_money(s.net_margin),
        "outstandingReceivables": round_money(s.outstanding_receivables),
        "outstandingPayables": round_money(s.outstanding_payables),
        "netOutstanding": round_money(s.net_outstanding),
        "cashFlow": {
            "incoming": round_money(s.cash_flow.incoming),
            "outgoing": round_money(s.cash_flow.outgoing),
            "net": round_money(s.cash_flow.net),
        },
    }


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return str(round_money(value))
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)


def attendance_csv_rows(rows: Iterable[AttendanceReportRow]) -> list[list[str]]:
    """One row per attendance record, header first."""

    out = [list(ATTENDANCE_CSV_HEADERS)]
    for r in rows:
        out.append(
            [
                _cell(r.lesson_date),
                r.student_name,
                r.class_name,
                r.school_name,
                r.status.value,
                r.teacher_name,
                r.notes or "",
            ]
        )
    return out


def wage_csv_rows(records: Iterable[WageRecord]) -> list[list[str]]:
    out = [list(WAGE_CSV_HEADERS)]
    for w in records:
        out.append(
            [
                w.teacher_name,
                w.teacher_email,
                _cell(w.month),
                _cell(w.year),
                _cell(w.total_hours),
                _cell(w.hourly_rate),
                _cell(w.total_amount),
                _cell(w.paid_amount),
                w.status.value,
                _cell(w.payment_date),
            ]
        )
    return out


def payment_csv_rows(records: Iterable[PaymentRecord]) -> list[list[str]]:
    out = [list(PAYMENT_CSV_HEADERS)]
    for p in records:
        out.append(
            [
                p.school_name,
                p.district,
                _cell(p.month),
                _cell(p.year),
                _cell(p.agreed_amount),
                _cell(p.paid_amount),
                p.status.value,
                _cell(p.payment_date),
            ]
        )
    return out


def summary_csv_rows(summary: FinancialSummary) -> list[list[str]]:
    margin = summary.net_margin.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    def sign(value: Decimal) -> str:
        return "Positive" if value >= 0 else "Negative"

    return [
        list(SUMMARY_CSV_HEADERS),
        ["Income", "Total Income", _cell(summary.total_income), "Completed", "Total received payments"],
        ["Expense", "Total Expenses", _cell(summary.total_expenses), "Completed", "Total paid wages"],
        ["Net Result", "Net Profit/Loss", _cell(summary.net_result), sign(summary.net_result), f"Net margin: {margin}%"],
        ["Outstanding", "Receivables", _cell(summary.outstanding_receivables), "Pending", "Unpaid school payments"],
        ["Outstanding", "Payables", _cell(summary.outstanding_payables), "Pending", "Unpaid teacher wages"],
        ["Cash Flow", "Net Outstanding", _cell(summary.net_outstanding), sign(summary.net_outstanding), "Net cash flow position"],
    ]


def render_csv(rows: Sequence[Sequence[str]]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return out.getvalue()


class ReportAssembler:
    """Compose aggregator output and request metadata into report objects."""

    def attendance_report(
        self,
        *,
        metadata: ReportMetadata,
        rollup: RollupResult,
        rows: Sequence[AttendanceReportRow],
        include_raw: bool,
    ) -> AttendanceReport:
        return AttendanceReport(metadata=metadata, rollup=rollup, raw_data=tuple(rows) if include_raw else None)

    def financial_report(
        self,
        *,
        metadata: ReportMetadata,
        analytics: FinancialAnalytics,
        wage_records: Optional[Sequence[WageRecord]] = None,
        payment_records: Optional[Sequence[PaymentRecord]] = None,
    ) -> FinancialReport:
        return FinancialReport(
            metadata=metadata,
            analytics=analytics,
            wage_records=tuple(wage_records) if wage_records is not None else None,
            payment_records=tuple(payment_records) if payment_records is not None else None,
        )

    def attendance_csv(self, rows: Sequence[AttendanceReportRow]) -> str:
        return render_csv(attendance_csv_rows(rows))

    def financial_csv(self, report: FinancialReport) -> str:
        sub_type = report.metadata.sub_type
        if sub_type == "wages":
            return render_csv(wage_csv_rows(report.wage_records or ()))
        if sub_type == "payments":
            return render_csv(payment_csv_rows(report.payment_records or ()))
        if report.analytics.summary is None:
            return render_csv([list(SUMMARY_CSV_HEADERS)])
        return render_csv(summary_csv_rows(report.analytics.summary))
