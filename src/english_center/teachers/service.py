from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict

from ..common.crud_service import CrudService
from ..core.exceptions import ValidationError
from ..students.service import clean_email


class TeacherService(CrudService):
    label = "Teacher"
    required_fields = ("full_name", "email")
    required_message = "Full name and email are required"
    int_fields = ("experience_years",)
    number_fields = ("salary",)
    date_fields = ("hire_date",)

    def __init__(self, repo, *, today: Callable[[], date] = date.today):
        super().__init__(repo, today=today)
        self.defaults = {"status": "ACTIVE", "hire_date": self._today}

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        clean_email(values)
        if (values.get("experience_years") or 0) < 0:
            raise ValidationError("experience_years cannot be negative")
        if (values.get("salary") or 0) < 0:
            raise ValidationError("salary cannot be negative")
        return values
