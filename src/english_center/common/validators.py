from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .serialization import normalize_mysql_time

E = TypeVar("E", bound=Enum)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: Mapping[str, Any], fields: Iterable[str], *, suffix: str = "") -> None:
    """Raise ``ValidationError`` naming the first missing field."""
    for field in fields:
        if is_blank(data.get(field)):
            raise ValidationError(f"{field} is required{suffix}")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and number != value:
        raise ValidationError(f"{field_name} must be an integer")
    return number


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if is_blank(value):
        return None
    return require_int(value, field_name)


def optional_number(value: Any, field_name: str) -> Optional[float]:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def parse_iso_date(value: Any, field_name: str) -> date:
    """Parse YYYY-MM-DD (a full ISO timestamp is accepted and truncated)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_time_of_day(value: Any, field_name: str) -> time:
    """Parse HH:MM or HH:MM:SS (also accepts what the connector returns for TIME)."""
    try:
        parsed = normalize_mysql_time(value)
    except (TypeError, ValueError):
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field_name} must be a time (HH:MM)")
    return parsed
