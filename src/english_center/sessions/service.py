from __future__ import annotations

from typing import Any, Dict, List, Set, Tuple

from ..app_logger import get_logger
from ..attendance.repository import AttendanceRepository
from ..common.crud_service import CrudService
from ..common.validators import parse_time_of_day
from ..core.exceptions import ValidationError

log = get_logger("sessions")


class SessionService(CrudService):
    """Class sessions.

    Deleting a session cascades to its attendance rows and moving a session to
    another class changes which class those rows count towards, so both
    operations rebuild the attendance summaries of every affected pair.
    """

    label = "Session"
    required_fields = ("class_id", "session_date", "session_time", "topic")
    required_message = "Class ID, session date, session time, and topic are required"
    int_fields = ("class_id", "duration_minutes")
    date_fields = ("session_date",)
    defaults = {"status": "SCHEDULED"}

    def __init__(self, repo, attendance: AttendanceRepository, **kwargs):
        super().__init__(repo, **kwargs)
        self._attendance = attendance

    def list_by_class(self, class_id: int) -> List[Dict[str, Any]]:
        return self._repo.list_by_class(int(class_id))

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        if values.get("session_time") is not None:
            values["session_time"] = parse_time_of_day(values["session_time"], "session_time")
        if (values.get("duration_minutes") or 0) < 0:
            raise ValidationError("duration_minutes cannot be negative")
        return values

    def update(self, record_id: int, data: Any) -> Dict[str, Any]:
        before = self.get(record_id)
        students = self._students_of(record_id)
        updated = super().update(record_id, data)

        old_class, new_class = int(before["class_id"]), int(updated["class_id"])
        if old_class != new_class:
            log.info("Session %s moved from class %s to %s", record_id, old_class, new_class)
            self._refresh({(s, c) for s in students for c in (old_class, new_class)})
        return updated

    def delete(self, record_id: int) -> Dict[str, Any]:
        students = self._students_of(record_id)
        deleted = super().delete(record_id)
        self._refresh({(s, int(deleted["class_id"])) for s in students})
        return deleted

    def _students_of(self, session_id: int) -> List[int]:
        return [r.student_id for r in self._attendance.list_by_session(int(session_id))]

    def _refresh(self, pairs: Set[Tuple[int, int]]) -> None:
        for student_id, class_id in sorted(pairs):
            self._attendance.recompute_summary(student_id=student_id, class_id=class_id)
