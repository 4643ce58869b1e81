from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..app_logger import get_logger
from ..common.validators import is_blank, require_enum, require_fields, require_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import AttendanceEntry, AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository

log = get_logger("attendance")

REQUIRED_FIELDS = ("session_id", "student_id", "attendance_status")


def _status_value(data: Mapping[str, Any]) -> Any:
    # The console sends ``attendance_status``; ``status`` is accepted as an alias.
    value = data.get("attendance_status")
    return data.get("status") if is_blank(value) else value


def clean_notes(value: Any, *, suffix: str = "") -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list, tuple, bool)):
        raise ValidationError(f"notes must be text{suffix}")
    return str(value)


def parse_entry(data: Any, *, suffix: str = "") -> AttendanceEntry:
    if not isinstance(data, Mapping):
        raise ValidationError(f"Attendance record must be an object{suffix}")

    normalized = dict(data)
    normalized["attendance_status"] = _status_value(data)
    require_fields(normalized, REQUIRED_FIELDS, suffix=suffix)

    return AttendanceEntry(
        session_id=require_int(data["session_id"], "session_id"),
        student_id=require_int(data["student_id"], "student_id"),
        status=require_enum(normalized["attendance_status"], AttendanceStatus, "attendance_status"),
        notes=clean_notes(data.get("notes"), suffix=suffix),
    )


class AttendanceService:
    """Use cases around attendance rows and their derived per-class summaries.

    Every write is followed by a summary refresh for each (student, class) pair
    it touched; the class comes from the session the record belongs to.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def list_records(self, *, session_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        if session_id is not None:
            return self._attendance.list_by_session(int(session_id))
        return self._attendance.list_all()

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_student(int(student_id))

    def get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def record(self, data: Any) -> AttendanceRecord:
        entry = parse_entry(data)
        saved = self._attendance.upsert(entry)
        self._refresh_for([saved])
        return saved

    def update_record(self, attendance_id: int, data: Any) -> AttendanceRecord:
        existing = self.get_record(attendance_id)
        if not isinstance(data, Mapping):
            raise ValidationError("Attendance record must be an object")

        for key in ("session_id", "student_id"):
            if not is_blank(data.get(key)) and require_int(data[key], key) != getattr(existing, key):
                raise ValidationError(f"{key} cannot be changed; record attendance for the new key instead")

        status_raw = _status_value(data)
        status = existing.status if is_blank(status_raw) else require_enum(status_raw, AttendanceStatus, "attendance_status")
        notes = clean_notes(data["notes"]) if "notes" in data else existing.notes

        # Updates by id: a row deleted since the read stays deleted.
        saved = self._attendance.update(existing.attendance_id, status=status, notes=notes)
        if not saved:
            raise NotFoundError("Attendance record not found")
        self._refresh_for([saved])
        return saved

    def bulk_record(self, payload: Any) -> Sequence[AttendanceRecord]:
        if not isinstance(payload, list):
            raise ValidationError("Expected an array of attendance records")
        if not payload:
            raise ValidationError("Attendance records array cannot be empty")

        entries = [parse_entry(item, suffix=" in all attendance records") for item in payload]
        saved = self._attendance.bulk_upsert(entries)
        log.info("Bulk attendance saved: %s records", len(saved))
        self._refresh_for(saved)
        return saved

    def delete_record(self, attendance_id: int) -> AttendanceRecord:
        deleted = self._attendance.delete(int(attendance_id))
        if not deleted:
            raise NotFoundError("Attendance record not found")
        self._refresh_for([deleted])
        return deleted

    def list_summaries(self) -> Sequence[AttendanceSummary]:
        return self._attendance.list_summaries()

    def get_summary(self, *, student_id: int, class_id: int) -> AttendanceSummary:
        summary = self._attendance.get_summary(student_id=int(student_id), class_id=int(class_id))
        if not summary:
            raise NotFoundError("Attendance summary not found")
        return summary

    def refresh_summary(self, *, student_id: int, class_id: int) -> AttendanceSummary:
        return self._attendance.recompute_summary(student_id=int(student_id), class_id=int(class_id))

    def _refresh_for(self, records: Iterable[AttendanceRecord]) -> None:
        pairs: dict[tuple[int, int], None] = {}
        for r in records:
            if r.class_id is not None:
                pairs.setdefault((r.student_id, r.class_id), None)

        for student_id, class_id in pairs:
            self._attendance.recompute_summary(student_id=student_id, class_id=class_id)
