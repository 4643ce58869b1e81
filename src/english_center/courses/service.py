from __future__ import annotations

from typing import Any, Dict

from ..common.crud_service import CrudService
from ..core.exceptions import ValidationError


class CourseService(CrudService):
    label = "Course"
    required_fields = ("course_name",)
    required_message = "Course name is required"
    int_fields = ("duration_weeks", "max_students")
    number_fields = ("fee",)
    defaults = {"status": "ACTIVE"}

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        for field in ("duration_weeks", "max_students", "fee"):
            if (values.get(field) or 0) < 0:
                raise ValidationError(f"{field} cannot be negative")
        return values
