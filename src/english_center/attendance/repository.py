from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, AttendanceRecord, AttendanceSummary


class AttendanceRepository(Protocol):
    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, entry: AttendanceEntry) -> AttendanceRecord:
        """Insert or overwrite the record keyed by (session_id, student_id) in one statement."""

        raise NotImplementedError

    def update(self, attendance_id: int, *, status: AttendanceStatus, notes: Optional[str]) -> Optional[AttendanceRecord]:
        """Overwrite status and notes of an existing row in one statement; None when it is gone."""

        raise NotImplementedError

    def bulk_upsert(self, entries: Sequence[AttendanceEntry]) -> Sequence[AttendanceRecord]:
        """Apply ``upsert`` to every entry in order inside one transaction (all or nothing)."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def recompute_summary(self, *, student_id: int, class_id: int) -> AttendanceSummary:
        """Rebuild the summary row for the pair from attendance rows."""

        raise NotImplementedError

    def get_summary(self, *, student_id: int, class_id: int) -> Optional[AttendanceSummary]:
        raise NotImplementedError

    def list_summaries(self) -> Sequence[AttendanceSummary]:
        raise NotImplementedError
