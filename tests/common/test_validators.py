from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from src.tutoring_attendance.tutoring_attendance.common.datetime_utils import parse_iso_date, parse_iso_datetime
from src.tutoring_attendance.tutoring_attendance.common.numbers import percentage, round_money
from src.tutoring_attendance.tutoring_attendance.common.validators import (
    require_decimal,
    require_enum,
    require_int,
    require_int_range,
)
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus
from src.tutoring_attendance.tutoring_attendance.core.exceptions import ValidationError


def test_require_int():
    assert require_int("7", "x") == 7
    assert require_int(3.0, "x") == 3
    for bad in (True, 2.5, "seven", None):
        with pytest.raises(ValidationError):
            require_int(bad, "x")


def test_require_int_range_message():
    with pytest.raises(ValidationError, match="Concern threshold must be 0-100"):
        require_int_range(120, "Concern threshold", min_value=0, max_value=100)
    assert require_int_range(0, "x", min_value=0) == 0


def test_require_decimal_avoids_float_noise():
    assert require_decimal(0.1, "Hours") == Decimal("0.1")
    assert require_decimal("2.25", "Hours", positive=True) == Decimal("2.25")
    for bad in ("NaN", "Infinity", "x", None, False):
        with pytest.raises(ValidationError):
            require_decimal(bad, "Hours")
    with pytest.raises(ValidationError):
        require_decimal(0, "Hours", positive=True)


def test_require_enum_lists_allowed_values():
    assert require_enum(AttendanceStatus, "LATE", "Status") is AttendanceStatus.LATE
    with pytest.raises(ValidationError, match="PRESENT, ABSENT, LATE, EXCUSED"):
        require_enum(AttendanceStatus, "late-ish", "Status")


def test_percentage_rounding():
    assert percentage(1, 3) == Decimal("33.33")
    assert percentage(2, 3) == Decimal("66.67")
    assert percentage(0, 0) == Decimal("0.00")
    assert round_money(Decimal("2.005")) == Decimal("2.01")


def test_date_parsing():
    assert parse_iso_date("2024-03-01") == date(2024, 3, 1)
    assert parse_iso_datetime("2024-03-01") == datetime(2024, 3, 1)
    assert parse_iso_datetime("2024-03-01T15:30:00") == datetime(2024, 3, 1, 15, 30)
    assert parse_iso_datetime("") is None
    for bad in ("03/01/2024", None):
        with pytest.raises(ValidationError):
            parse_iso_date(bad)
    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday")


def test_offset_timestamps_become_naive_local_time():
    expected = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_iso_datetime("2024-03-01T10:00:00Z") == expected
    assert parse_iso_datetime("2024-03-01T10:00:00+00:00") == expected
    assert parse_iso_datetime("2024-03-01T17:00:00+07:00") == expected
    assert parse_iso_datetime("2024-03-01T10:00:00Z").tzinfo is None
