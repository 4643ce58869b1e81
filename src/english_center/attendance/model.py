from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEntry:
    """One attendance decision as submitted by the console."""

    session_id: int
    student_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Stored attendance row; at most one per (session_id, student_id)."""

    attendance_id: int
    session_id: int
    student_id: int
    status: AttendanceStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    class_id: Optional[int] = None
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "session_id": self.session_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "class_id": self.class_id,
            "attendance_status": self.status.value,
            "notes": self.notes,
            "created_date": self.created_at,
            "updated_date": self.updated_at,
        }


@dataclass(frozen=True)
class AttendanceCounts:
    total_sessions: int = 0
    present_count: int = 0
    absent_count: int = 0
    late_count: int = 0
    excused_count: int = 0

    @property
    def attendance_rate(self) -> float:
        return attendance_rate(self.present_count, self.late_count, self.total_sessions)


@dataclass(frozen=True)
class AttendanceSummary:
    """Derived per (student, class) totals; rebuilt from attendance rows only."""

    student_id: int
    class_id: int
    total_sessions: int
    present_count: int
    absent_count: int
    late_count: int
    excused_count: int
    attendance_rate: float
    last_updated: Optional[datetime] = None
    student_name: Optional[str] = None
    class_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "total_sessions": self.total_sessions,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "late_count": self.late_count,
            "excused_count": self.excused_count,
            "attendance_rate": self.attendance_rate,
            "last_updated": self.last_updated,
        }


def attendance_rate(present_count: int, late_count: int, total_sessions: int) -> float:
    """Percentage of sessions attended (late counts as attended), two decimals.

    A pair with no recorded sessions has a rate of 0.
    """

    if total_sessions <= 0:
        return 0.0
    rate = Decimal(int(present_count) + int(late_count)) * 100 / Decimal(int(total_sessions))
    return float(rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
