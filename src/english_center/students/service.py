from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict

from ..common.crud_service import CrudService
from ..core.exceptions import ValidationError


def clean_email(values: Dict[str, Any]) -> None:
    if "email" in values and values["email"] is not None:
        email = str(values["email"]).strip()
        if "@" not in email:
            raise ValidationError("Invalid email address")
        values["email"] = email


class StudentService(CrudService):
    label = "Student"
    required_fields = ("full_name", "email")
    required_message = "Full name and email are required"
    date_fields = ("date_of_birth", "registration_date")

    def __init__(self, repo, *, today: Callable[[], date] = date.today):
        super().__init__(repo, today=today)
        self.defaults = {"status": "ACTIVE", "registration_date": self._today}

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        clean_email(values)
        return values
