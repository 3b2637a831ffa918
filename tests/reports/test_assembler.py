from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal

from src.tutoring_attendance.tutoring_attendance.attendance.model import AttendanceReportRow
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus, PaymentStatus
from src.tutoring_attendance.tutoring_attendance.finance.aggregator import FinancialAggregator
from src.tutoring_attendance.tutoring_attendance.finance.model import PaymentRecord, WageRecord
from src.tutoring_attendance.tutoring_attendance.reports.assembler import (
    ATTENDANCE_CSV_HEADERS,
    PAYMENT_CSV_HEADERS,
    WAGE_CSV_HEADERS,
    ReportAssembler,
    ReportMetadata,
    render_csv,
    summary_csv_rows,
)


def _parse(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def _wage(**kw) -> WageRecord:
    fields = dict(
        teacher_id="t1",
        teacher_name="Ana Lopez",
        teacher_email="ana@example.org",
        month=3,
        year=2024,
        total_hours=Decimal("10"),
        hourly_rate=Decimal("25.5"),
        total_amount=Decimal("255"),
        paid_amount=Decimal("0"),
        status=PaymentStatus.PENDING,
    )
    fields.update(kw)
    return WageRecord(**fields)


def _payment(**kw) -> PaymentRecord:
    fields = dict(
        school_id="s1",
        school_name="North High",
        district="North",
        month=3,
        year=2024,
        agreed_amount=Decimal("1000"),
        paid_amount=Decimal("1000"),
        status=PaymentStatus.PAID,
        payment_date=date(2024, 3, 28),
    )
    fields.update(kw)
    return PaymentRecord(**fields)


def _metadata(sub_type=None) -> ReportMetadata:
    return ReportMetadata(
        report_type="financial",
        sub_type=sub_type,
        start=date(2024, 3, 1),
        end=date(2024, 3, 31),
        generated_at=datetime(2024, 4, 1, 8, 0),
        generated_by="admin",
    )


def test_attendance_csv_has_header_and_one_row_per_record():
    rows = [
        AttendanceReportRow(
            lesson_id="L1",
            lesson_date=datetime(2024, 3, 4, 15, 30),
            student_id="st1",
            student_name='Jo "JJ" Smith',
            class_id="c1",
            class_name="Math 7",
            school_id="s1",
            school_name="North High",
            teacher_name="Ana Lopez",
            status=AttendanceStatus.LATE,
            notes="Policy: Default Policy (ID: default) | Late: 20min > 15min tolerance",
        )
    ]
    parsed = _parse(ReportAssembler().attendance_csv(rows))

    assert parsed[0] == ATTENDANCE_CSV_HEADERS
    assert parsed[1] == [
        "2024-03-04",
        'Jo "JJ" Smith',
        "Math 7",
        "North High",
        "LATE",
        "Ana Lopez",
        "Policy: Default Policy (ID: default) | Late: 20min > 15min tolerance",
    ]


def test_every_cell_is_quoted():
    assert render_csv([["a", "1"]]) == '"a","1"\n'


def test_wage_and_payment_csv():
    assembler = ReportAssembler()
    wages = [_wage()]
    payments = [_payment()]

    wage_report = assembler.financial_report(
        metadata=_metadata("wages"),
        analytics=FinancialAggregator().aggregate(wages, None),
        wage_records=wages,
    )
    parsed = _parse(assembler.financial_csv(wage_report))
    assert parsed[0] == WAGE_CSV_HEADERS
    assert parsed[1] == ["Ana Lopez", "ana@example.org", "3", "2024", "10.00", "25.50", "255.00", "0.00", "PENDING", ""]

    payment_report = assembler.financial_report(
        metadata=_metadata("payments"),
        analytics=FinancialAggregator().aggregate(None, payments),
        payment_records=payments,
    )
    parsed = _parse(assembler.financial_csv(payment_report))
    assert parsed[0] == PAYMENT_CSV_HEADERS
    assert parsed[1] == ["North High", "North", "3", "2024", "1000.00", "1000.00", "PAID", "2024-03-28"]


def test_summary_csv_rows():
    analytics = FinancialAggregator().aggregate(
        [_wage(paid_amount=Decimal("7000"), status=PaymentStatus.PAID)],
        [_payment(paid_amount=Decimal("10000"))],
    )
    rows = summary_csv_rows(analytics.summary)

    assert [r[0] for r in rows[1:]] == ["Income", "Expense", "Net Result", "Outstanding", "Outstanding", "Cash Flow"]
    assert rows[3][2] == "3000.00"
    assert rows[3][3] == "Positive"
    assert rows[3][4] == "Net margin: 30.0%"


def test_financial_report_dict_contains_only_requested_blocks():
    assembler = ReportAssembler()
    wages = [_wage()]
    report = assembler.financial_report(
        metadata=_metadata("wages"),
        analytics=FinancialAggregator().aggregate(wages, None),
        wage_records=wages,
    )
    out = report.to_dict()

    assert set(out) == {"metadata", "wageData"}
    assert out["metadata"]["subType"] == "wages"
    assert out["wageData"]["analytics"]["totalWages"] == Decimal("255.00")
    assert out["wageData"]["analytics"]["teacherCount"] == 1
