from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be an integer")


def require_int_range(value: Any, field_name: str, *, min_value: int, max_value: Optional[int] = None) -> int:
    number = require_int(value, field_name)
    if number < min_value or (max_value is not None and number > max_value):
        bound = f"{min_value}-{max_value}" if max_value is not None else f">= {min_value}"
        raise ValidationError(f"{field_name} must be {bound}")
    return number


def require_decimal(value: Any, field_name: str, *, positive: bool = False) -> Decimal:
    """Parse a monetary/hour value into Decimal without going through float."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if positive and number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    if not positive and number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def require_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")
