from __future__ import annotations

from typing import Any, Dict

from ..common.crud_service import CrudService
from ..core.constants import SCORE_MAX, SCORE_MIN
from ..core.exceptions import ValidationError


class TestService(CrudService):
    __test__ = False  # not a pytest class

    label = "Test"
    required_fields = ("test_name", "test_date")
    required_message = "Test name and test date are required"
    int_fields = ("class_id", "test_type_id", "duration_minutes")
    number_fields = ("max_score",)
    date_fields = ("test_date",)
    defaults = {"status": "SCHEDULED", "max_score": SCORE_MAX}

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        max_score = values.get("max_score")
        if max_score is not None and not SCORE_MIN < max_score <= SCORE_MAX:
            raise ValidationError(f"max_score must be between {SCORE_MIN} and {SCORE_MAX}")
        if (values.get("duration_minutes") or 0) < 0:
            raise ValidationError("duration_minutes cannot be negative")
        return values
