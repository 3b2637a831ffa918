from decimal import Decimal

from src.tutoring_attendance.tutoring_attendance.core.enums import PaymentStatus
from src.tutoring_attendance.tutoring_attendance.finance.aggregator import FinancialAggregator
from src.tutoring_attendance.tutoring_attendance.finance.model import PaymentRecord, WageRecord


def _wage(teacher_id, amount, paid, status, rate="20", hours="1"):
    return WageRecord(
        teacher_id=teacher_id,
        month=1,
        year=2024,
        total_hours=Decimal(hours),
        hourly_rate=Decimal(rate),
        total_amount=Decimal(amount),
        paid_amount=Decimal(paid),
        status=status,
    )


def _payment(school_id, agreed, paid, status):
    return PaymentRecord(
        school_id=school_id,
        month=1,
        year=2024,
        agreed_amount=Decimal(agreed),
        paid_amount=Decimal(paid),
        status=status,
    )


def test_summary_net_and_margin():
    analytics = FinancialAggregator().aggregate(
        [_wage("t1", "7000", "7000", PaymentStatus.PAID)],
        [_payment("s1", "10000", "10000", PaymentStatus.PAID)],
    )
    summary = analytics.summary

    assert summary.total_income == Decimal("10000")
    assert summary.total_expenses == Decimal("7000")
    assert summary.net_result == Decimal("3000")
    assert summary.net_margin == Decimal("30")


def test_zero_income_means_zero_margin():
    analytics = FinancialAggregator().aggregate(
        [_wage("t1", "500", "500", PaymentStatus.PAID)],
        [_payment("s1", "1000", "0", PaymentStatus.PENDING)],
    )
    assert analytics.summary.net_margin == Decimal("0")
    assert analytics.summary.net_result == Decimal("-500")


def test_outstanding_and_cash_flow():
    analytics = FinancialAggregator().aggregate(
        [
            _wage("t1", "300", "0", PaymentStatus.PENDING),
            _wage("t2", "200", "0", PaymentStatus.OVERDUE),
        ],
        [
            _payment("s1", "1000", "0", PaymentStatus.PENDING),
            _payment("s2", "400", "0", PaymentStatus.OVERDUE),
        ],
    )
    s = analytics.summary

    assert s.outstanding_receivables == Decimal("1000")
    assert s.outstanding_payables == Decimal("300")
    assert s.net_outstanding == Decimal("700")
    assert (s.cash_flow.incoming, s.cash_flow.outgoing, s.cash_flow.net) == (
        Decimal("1000"),
        Decimal("300"),
        Decimal("700"),
    )
    assert analytics.wage_analytics.total_overdue == Decimal("200")
    assert analytics.payment_analytics.total_overdue == Decimal("400")


def test_wage_analytics_mean_rate_and_distinct_teachers():
    analytics = FinancialAggregator().aggregate(
        [
            _wage("t1", "100", "0", PaymentStatus.PENDING, rate="20", hours="5"),
            _wage("t1", "60", "0", PaymentStatus.PENDING, rate="30", hours="2"),
            _wage("t2", "40", "40", PaymentStatus.PAID, rate="40", hours="1"),
        ]
    )
    w = analytics.wage_analytics

    assert w.average_hourly_rate == Decimal("30")
    assert w.teacher_count == 2
    assert w.record_count == 3
    assert w.total_hours == Decimal("8")
    assert analytics.payment_analytics is None
    assert analytics.summary is None


def test_empty_blocks_are_zero():
    analytics = FinancialAggregator().aggregate([], [])
    assert analytics.wage_analytics.average_hourly_rate == Decimal("0")
    assert analytics.payment_analytics.average_payment == Decimal("0")
    assert analytics.summary.net_margin == Decimal("0")
