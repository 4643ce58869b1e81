from __future__ import annotations

from datetime import date
from typing import Any, Callable, Mapping, Optional, Sequence

from ..app_logger import get_logger
from ..classes.repository import OccupancyMaintainer
from ..common.validators import (
    is_blank,
    optional_number,
    parse_iso_date,
    require_enum,
    require_int,
    require_non_empty,
)
from ..core.enums import EnrollmentStatus, FeeStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Enrollment, EnrollmentData
from .repository import EnrollmentRepository

log = get_logger("enrollments")


class EnrollmentService:
    """Create/update/delete enrollments and keep ``classes.current_students`` in step.

    Storage constraints reject unknown students/classes and duplicate
    (student, class) pairs; occupancy is recomputed only after a write succeeds.
    """

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        occupancy: OccupancyMaintainer,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._enrollments = enrollments
        self._occupancy = occupancy
        self._today = today

    def list_all(self) -> Sequence[Enrollment]:
        return self._enrollments.list_all()

    def list_by_student(self, student_id: int) -> Sequence[Enrollment]:
        return self._enrollments.list_by_student(int(student_id))

    def list_by_class(self, class_id: int) -> Sequence[Enrollment]:
        return self._enrollments.list_by_class(int(class_id))

    def search(self, term: str) -> Sequence[Enrollment]:
        return self._enrollments.search(require_non_empty(term, "Search term"))

    def get(self, enrollment_id: int) -> Enrollment:
        enrollment = self._enrollments.get_by_id(int(enrollment_id))
        if not enrollment:
            raise NotFoundError("Enrollment not found")
        return enrollment

    def create(self, data: Any) -> Enrollment:
        payload = self._parse(data, base=None)
        created = self._enrollments.create(payload)
        self._recompute(created.class_id)
        log.info("Enrollment %s created (student=%s, class=%s)", created.enrollment_id, created.student_id, created.class_id)
        return created

    def update(self, enrollment_id: int, data: Any) -> Enrollment:
        existing = self.get(enrollment_id)
        payload = self._parse(data, base=existing)
        updated = self._enrollments.update(existing.enrollment_id, payload)
        if not updated:
            raise NotFoundError("Enrollment not found")

        self._recompute(updated.class_id)
        if existing.class_id != updated.class_id:
            self._recompute(existing.class_id)
        return updated

    def delete(self, enrollment_id: int) -> Enrollment:
        deleted = self._enrollments.delete(int(enrollment_id))
        if not deleted:
            raise NotFoundError("Enrollment not found")
        self._recompute(deleted.class_id)
        return deleted

    def _recompute(self, class_id: int) -> None:
        count = self._occupancy.recompute_occupancy(int(class_id))
        log.debug("Class %s occupancy recomputed: %s", class_id, count)

    def _parse(self, data: Any, *, base: Optional[Enrollment]) -> EnrollmentData:
        if not isinstance(data, Mapping):
            raise ValidationError("Request body must be a JSON object")

        def pick(key: str, fallback: Any) -> Any:
            value = data.get(key)
            return fallback if is_blank(value) else value

        student_id = pick("student_id", base.student_id if base else None)
        class_id = pick("class_id", base.class_id if base else None)
        if is_blank(student_id) or is_blank(class_id):
            raise ValidationError("Student ID and Class ID are required")

        fee_paid = optional_number(pick("fee_paid", base.fee_paid if base else 0), "fee_paid") or 0.0
        if fee_paid < 0:
            raise ValidationError("fee_paid cannot be negative")

        return EnrollmentData(
            student_id=require_int(student_id, "student_id"),
            class_id=require_int(class_id, "class_id"),
            enrollment_date=parse_iso_date(
                pick("enrollment_date", base.enrollment_date if base else self._today()), "enrollment_date"
            ),
            fee_paid=fee_paid,
            payment_status=require_enum(
                pick("payment_status", base.payment_status if base else FeeStatus.PENDING), FeeStatus, "payment_status"
            ),
            status=require_enum(
                pick("status", base.status if base else EnrollmentStatus.ACTIVE), EnrollmentStatus, "status"
            ),
        )
