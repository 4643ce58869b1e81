from __future__ import annotations

from typing import Any, Dict, List

from ..common.crud_service import CrudService
from ..common.validators import require_enum
from ..core.enums import PaymentStatus
from ..core.exceptions import ValidationError


class PaymentService(CrudService):
    label = "Payment"
    required_fields = ("student_id", "amount", "payment_date")
    required_message = "Student ID, amount, and payment date are required"
    int_fields = ("student_id", "enrollment_id")
    number_fields = ("amount",)
    date_fields = ("payment_date",)
    defaults = {"status": PaymentStatus.COMPLETED.value}

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        if "amount" in values and values["amount"] is not None and values["amount"] <= 0:
            raise ValidationError("Amount must be greater than 0")
        if values.get("status") is not None:
            values["status"] = require_enum(values["status"], PaymentStatus, "status").value
        return values

    def list_by_student(self, student_id: int) -> List[Dict[str, Any]]:
        return self._repo.list_by_student(int(student_id))

    def summary(self) -> List[Dict[str, Any]]:
        return self._repo.summary()

    def student_options(self) -> List[Dict[str, Any]]:
        return self._repo.student_options()

    def enrollment_options(self) -> List[Dict[str, Any]]:
        return self._repo.enrollment_options()
