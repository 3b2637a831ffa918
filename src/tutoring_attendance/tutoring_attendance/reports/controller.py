from __future__ import annotations

from flask import Flask, Response, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_body
from ..common.validators import require_enum
from ..core.enums import FinancialReportType, ReportFormat
from ..container import Container
from .service import ReportData


def _render(data: ReportData):
    if data.csv is not None:
        return Response(
            data.csv,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{data.filename}"'},
        )
    return jsonify(data.report.to_dict())


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["POST"], endpoint="attendance_report")
    def attendance_report():
        data = json_body()
        result = container.report_service.build_attendance_report(
            start=parse_iso_date(data.get("startDate")),
            end=parse_iso_date(data.get("endDate")),
            school_id=data.get("schoolId") or None,
            class_id=data.get("classId") or None,
            fmt=require_enum(ReportFormat, data.get("format") or "json", "format"),
            generated_by=data.get("generatedBy"),
        )
        return _render(result)

    @app.route("/api/reports/financial", methods=["POST"], endpoint="financial_report")
    def financial_report():
        data = json_body()
        result = container.report_service.build_financial_report(
            start=parse_iso_date(data.get("startDate")),
            end=parse_iso_date(data.get("endDate")),
            report_type=require_enum(FinancialReportType, data.get("reportType") or "summary", "reportType"),
            school_id=data.get("schoolId") or None,
            teacher_id=data.get("teacherId") or None,
            fmt=require_enum(ReportFormat, data.get("format") or "json", "format"),
            generated_by=data.get("generatedBy"),
        )
        return _render(result)
