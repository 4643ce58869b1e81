from __future__ import annotations

from typing import Any, Dict

from ..common.crud_service import CrudService
from ..core.exceptions import NotFoundError
from .repository import ClassRepository


class ClassService(CrudService):
    label = "Class"
    required_fields = ("class_name", "course_id", "teacher_id")
    required_message = "Class name, course ID, and teacher ID are required"
    int_fields = ("course_id", "teacher_id")
    date_fields = ("start_date", "end_date")
    defaults = {"status": "ACTIVE"}

    _repo: ClassRepository

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        # Never accept the derived counter from the client.
        values.pop("current_students", None)
        return values

    def create(self, data: Any) -> Dict[str, Any]:
        created = super().create(data)
        # A new class has no enrollments; make the stored counter say so.
        self._repo.recompute_occupancy(int(created["class_id"]))
        return self.get(int(created["class_id"]))

    def refresh_student_count(self, class_id: int) -> Dict[str, Any]:
        if self._repo.recompute_occupancy(int(class_id)) is None:
            raise NotFoundError("Class not found")
        return self.get(class_id)
