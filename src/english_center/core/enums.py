from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Per-session attendance mark for one student."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class EnrollmentStatus(str, Enum):
    """Only ACTIVE enrollments count towards a class's occupancy."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"


class FeeStatus(str, Enum):
    """How much of the course fee an enrollment has paid."""

    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class PaymentStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
