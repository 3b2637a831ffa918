from __future__ import annotations

from enum import Enum


class PolicyScope(str, Enum):
    """Phạm vi áp dụng của chính sách điểm danh, xếp theo độ cụ thể giảm dần."""

    CLASS = "CLASS"
    SCHOOL = "SCHOOL"
    GLOBAL = "GLOBAL"


class AttendanceStatus(str, Enum):
    """Trạng thái điểm danh chuẩn hoá lưu trong CSDL."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class PaymentStatus(str, Enum):
    """Trạng thái thanh toán dùng chung cho lương giáo viên và học phí trường."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class ReportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


class FinancialReportType(str, Enum):
    WAGES = "wages"
    PAYMENTS = "payments"
    SUMMARY = "summary"
