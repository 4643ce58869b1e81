from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import EnrollmentStatus, FeeStatus


@dataclass(frozen=True)
class EnrollmentData:
    """Validated write payload; (student_id, class_id) is unique across enrollments."""

    student_id: int
    class_id: int
    enrollment_date: date
    fee_paid: float
    payment_status: FeeStatus
    status: EnrollmentStatus


@dataclass(frozen=True)
class Enrollment:
    enrollment_id: int
    student_id: int
    class_id: int
    enrollment_date: date
    fee_paid: float
    payment_status: FeeStatus
    status: EnrollmentStatus
    student_name: Optional[str] = None
    class_name: Optional[str] = None
    course_fee: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "enrollment_id": self.enrollment_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "course_fee": self.course_fee,
            "enrollment_date": self.enrollment_date,
            "fee_paid": self.fee_paid,
            "payment_status": self.payment_status.value,
            "status": self.status.value,
        }
