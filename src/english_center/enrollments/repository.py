from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Enrollment, EnrollmentData


class EnrollmentRepository(Protocol):
    def list_all(self) -> Sequence[Enrollment]:
        raise NotImplementedError

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        raise NotImplementedError

    def list_by_student(self, student_id: int) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_by_class(self, class_id: int) -> Sequence[Enrollment]:
        raise NotImplementedError

    def search(self, term: str) -> Sequence[Enrollment]:
        raise NotImplementedError

    def create(self, data: EnrollmentData) -> Enrollment:
        """Raises InvalidReferenceError / DuplicateEnrollmentError on constraint violations."""

        raise NotImplementedError

    def update(self, enrollment_id: int, data: EnrollmentData) -> Optional[Enrollment]:
        raise NotImplementedError

    def delete(self, enrollment_id: int) -> Optional[Enrollment]:
        raise NotImplementedError
