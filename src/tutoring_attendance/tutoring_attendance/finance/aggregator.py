"""Wage and school-payment analytics over one reporting window.

All sums stay in Decimal; rounding for display happens in the report assembler.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..common.numbers import HUNDRED, ZERO
from ..core.enums import PaymentStatus
from .model import PaymentRecord, WageRecord


@dataclass(frozen=True)
class WageAnalytics:
    total_wages: Decimal
    total_paid: Decimal
    total_pending: Decimal
    total_overdue: Decimal
    total_hours: Decimal
    average_hourly_rate: Decimal
    record_count: int
    teacher_count: int


@dataclass(frozen=True)
class PaymentAnalytics:
    total_revenue: Decimal
    total_received: Decimal
    total_pending: Decimal
    total_overdue: Decimal
    average_payment: Decimal
    record_count: int
    school_count: int


@dataclass(frozen=True)
class CashFlow:
    incoming: Decimal
    outgoing: Decimal
    net: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    total_income: Decimal
    total_expenses: Decimal
    net_result: Decimal
    net_margin: Decimal
    outstanding_receivables: Decimal
    outstanding_payables: Decimal
    net_outstanding: Decimal
    cash_flow: CashFlow


@dataclass(frozen=True)
class FinancialAnalytics:
    wage_analytics: Optional[WageAnalytics]
    payment_analytics: Optional[PaymentAnalytics]
    summary: Optional[FinancialSummary]


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


class FinancialAggregator:
    def wage_analytics(self, records: Iterable[WageRecord]) -> WageAnalytics:
        records = list(records)
        count = len(records)
        return WageAnalytics(
            total_wages=_sum(w.total_amount for w in records),
            total_paid=_sum(w.paid_amount for w in records),
            total_pending=_sum(w.total_amount for w in records if w.status == PaymentStatus.PENDING),
            total_overdue=_sum(w.total_amount for w in records if w.status == PaymentStatus.OVERDUE),
            total_hours=_sum(w.total_hours for w in records),
            # Simple mean per record, not weighted by hours.
            average_hourly_rate=_sum(w.hourly_rate for w in records) / count if count else ZERO,
            record_count=count,
            teacher_count=len({w.teacher_id for w in records}),
        )

    def payment_analytics(self, records: Iterable[PaymentRecord]) -> PaymentAnalytics:
        records = list(records)
        count = len(records)
        total_revenue = _sum(p.agreed_amount for p in records)
        return PaymentAnalytics(
            total_revenue=total_revenue,
            total_received=_sum(p.paid_amount for p in records),
            total_pending=_sum(p.agreed_amount for p in records if p.status == PaymentStatus.PENDING),
            total_overdue=_sum(p.agreed_amount for p in records if p.status == PaymentStatus.OVERDUE),
            average_payment=total_revenue / count if count else ZERO,
            record_count=count,
            school_count=len({p.school_id for p in records}),
        )

    def summarize(self, wages: WageAnalytics, payments: PaymentAnalytics) -> FinancialSummary:
        total_income = payments.total_received
        total_expenses = wages.total_paid
        net_result = total_income - total_expenses
        net_margin = net_result / total_income * HUNDRED if total_income > 0 else ZERO

        receivables = payments.total_pending
        payables = wages.total_pending
        net_outstanding = receivables - payables
        return FinancialSummary(
            total_income=total_income,
            total_expenses=total_expenses,
            net_result=net_result,
            net_margin=net_margin,
            outstanding_receivables=receivables,
            outstanding_payables=payables,
            net_outstanding=net_outstanding,
            cash_flow=CashFlow(incoming=receivables, outgoing=payables, net=net_outstanding),
        )

    def aggregate(
        self,
        wage_records: Optional[Iterable[WageRecord]] = None,
        payment_records: Optional[Iterable[PaymentRecord]] = None,
    ) -> FinancialAnalytics:
        """Analytics for whichever blocks are given; the summary needs both."""

        wages = self.wage_analytics(wage_records) if wage_records is not None else None
        payments = self.payment_analytics(payment_records) if payment_records is not None else None
        summary = self.summarize(wages, payments) if wages is not None and payments is not None else None
        return FinancialAnalytics(wage_analytics=wages, payment_analytics=payments, summary=summary)
