from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    full_name: str
    email: str
    hourly_rate: Decimal


@dataclass(frozen=True)
class WageRecord:
    """Thực thể miền (domain): Bảng lương tháng của giáo viên."""

    teacher_id: str
    month: int
    year: int
    total_hours: Decimal
    hourly_rate: Decimal
    total_amount: Decimal
    paid_amount: Decimal
    status: PaymentStatus
    teacher_name: str = ""
    teacher_email: str = ""
    payment_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "teacherId": self.teacher_id,
            "teacherName": self.teacher_name,
            "teacherEmail": self.teacher_email,
            "month": self.month,
            "year": self.year,
            "totalHours": self.total_hours,
            "hourlyRate": self.hourly_rate,
            "totalAmount": self.total_amount,
            "paidAmount": self.paid_amount,
            "status": self.status.value,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
        }


@dataclass(frozen=True)
class PaymentRecord:
    """Thực thể miền (domain): Khoản thanh toán tháng của trường."""

    school_id: str
    month: int
    year: int
    agreed_amount: Decimal
    paid_amount: Decimal
    status: PaymentStatus
    school_name: str = ""
    district: str = ""
    payment_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "schoolId": self.school_id,
            "schoolName": self.school_name,
            "district": self.district,
            "month": self.month,
            "year": self.year,
            "agreedAmount": self.agreed_amount,
            "paidAmount": self.paid_amount,
            "status": self.status.value,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
        }
