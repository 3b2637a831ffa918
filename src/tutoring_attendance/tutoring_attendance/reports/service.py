from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Union

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.enums import FinancialReportType, ReportFormat
from ..core.exceptions import ValidationError
from ..finance.aggregator import FinancialAggregator
from ..finance.repository import FinanceRepository
from .assembler import AttendanceReport, FinancialReport, ReportAssembler, ReportMetadata
from .rollup import RollupAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    report: Union[AttendanceReport, FinancialReport]
    csv: Optional[str] = None
    filename: Optional[str] = None


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        finance: FinanceRepository,
        rollup: RollupAggregator,
        *,
        financial: Optional[FinancialAggregator] = None,
        assembler: Optional[ReportAssembler] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._finance = finance
        self._rollup = rollup
        self._financial = financial or FinancialAggregator()
        self._assembler = assembler or ReportAssembler()
        self._clock = clock

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end < start:
            raise ValidationError("End date cannot be earlier than start date")

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        school_id: Optional[str] = None,
        class_id: Optional[str] = None,
        fmt: ReportFormat = ReportFormat.JSON,
        generated_by: Optional[str] = None,
    ) -> ReportData:
        self._check_range(start, end)
        generated_at = self._clock()

        rows = self._attendance.get_report_rows(start_date=start, end_date=end, school_id=school_id, class_id=class_id)
        rollup = self._rollup.aggregate(rows, at=generated_at)

        metadata = ReportMetadata(
            report_type="attendance",
            start=start,
            end=end,
            generated_at=generated_at,
            generated_by=generated_by,
            filters={"schoolId": school_id, "classId": class_id},
        )
        report = self._assembler.attendance_report(
            metadata=metadata,
            rollup=rollup,
            rows=rows,
            include_raw=fmt == ReportFormat.JSON,
        )
        logger.info(
            "Attendance report %s..%s: %d records, %d concern students",
            start,
            end,
            rollup.summary.total_records,
            rollup.summary.students_with_concerns,
        )

        if fmt == ReportFormat.CSV:
            return ReportData(
                report=report,
                csv=self._assembler.attendance_csv(rows),
                filename=f"attendance-report-{start.isoformat()}-{end.isoformat()}.csv",
            )
        return ReportData(report=report)

    def build_financial_report(
        self,
        *,
        start: date,
        end: date,
        report_type: FinancialReportType = FinancialReportType.SUMMARY,
        school_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        fmt: ReportFormat = ReportFormat.JSON,
        generated_by: Optional[str] = None,
    ) -> ReportData:
        self._check_range(start, end)
        generated_at = self._clock()

        wages = None
        payments = None
        if report_type in (FinancialReportType.WAGES, FinancialReportType.SUMMARY):
            wages = self._finance.list_wage_records(
                start_date=start,
                end_date=end,
                school_id=school_id,
                teacher_id=teacher_id,
            )
        if report_type in (FinancialReportType.PAYMENTS, FinancialReportType.SUMMARY):
            payments = self._finance.list_payment_records(start_date=start, end_date=end, school_id=school_id)

        analytics = self._financial.aggregate(wages, payments)
        metadata = ReportMetadata(
            report_type="financial",
            sub_type=report_type.value,
            start=start,
            end=end,
            generated_at=generated_at,
            generated_by=generated_by,
            filters={"schoolId": school_id, "teacherId": teacher_id},
        )
        report = self._assembler.financial_report(
            metadata=metadata,
            analytics=analytics,
            wage_records=wages,
            payment_records=payments,
        )
        logger.info("Financial %s report %s..%s generated", report_type.value, start, end)

        if fmt == ReportFormat.CSV:
            return ReportData(
                report=report,
                csv=self._assembler.financial_csv(report),
                filename=f"financial-report-{report_type.value}-{start.isoformat()}-{end.isoformat()}.csv",
            )
        return ReportData(report=report)
