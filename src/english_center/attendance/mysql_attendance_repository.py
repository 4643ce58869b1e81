from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors

from ..app_logger import get_logger
from ..core.enums import AttendanceStatus
from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseClient
from ..database.mysql_base import db_cursor, fetchall, fetchone, storage_errors
from .model import AttendanceCounts, AttendanceEntry, AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository

log = get_logger("attendance")

_RECORD_SELECT = """
    SELECT
        a.attendance_id, a.session_id, a.student_id, a.attendance_status, a.notes,
        a.created_date, a.updated_date,
        ses.class_id,
        s.full_name AS student_name
    FROM attendance a
    JOIN students s ON s.student_id = a.student_id
    JOIN sessions ses ON ses.session_id = a.session_id
"""

_SUMMARY_SELECT = """
    SELECT
        sm.student_id, s.full_name AS student_name,
        sm.class_id, c.class_name,
        sm.total_sessions, sm.present_count, sm.absent_count, sm.late_count, sm.excused_count,
        sm.attendance_rate, sm.last_updated
    FROM attendance_summary sm
    JOIN students s ON s.student_id = sm.student_id
    JOIN classes c ON c.class_id = sm.class_id
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        session_id=int(r["session_id"]),
        student_id=int(r["student_id"]),
        status=AttendanceStatus(r["attendance_status"]),
        notes=r.get("notes"),
        created_at=r["created_date"],
        updated_at=r["updated_date"],
        class_id=int(r["class_id"]) if r.get("class_id") is not None else None,
        student_name=r.get("student_name"),
    )


def _to_summary(r: Dict[str, Any]) -> AttendanceSummary:
    return AttendanceSummary(
        student_id=int(r["student_id"]),
        class_id=int(r["class_id"]),
        total_sessions=int(r["total_sessions"]),
        present_count=int(r["present_count"]),
        absent_count=int(r["absent_count"]),
        late_count=int(r["late_count"]),
        excused_count=int(r["excused_count"]),
        attendance_rate=float(r["attendance_rate"]),
        last_updated=r.get("last_updated"),
        student_name=r.get("student_name"),
        class_name=r.get("class_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, db: DatabaseClient):
        self._db = db

    def list_all(self) -> Sequence[AttendanceRecord]:
        with storage_errors("fetching all attendance records"), db_cursor(self._db) as (_, cur):
            cur.execute(_RECORD_SELECT + " ORDER BY a.created_date DESC, a.attendance_id DESC")
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_session(self, session_id: int) -> Sequence[AttendanceRecord]:
        with storage_errors("fetching attendance records"), db_cursor(self._db) as (_, cur):
            cur.execute(_RECORD_SELECT + " WHERE a.session_id=%s ORDER BY s.full_name", (int(session_id),))
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with storage_errors("fetching student attendance"), db_cursor(self._db) as (_, cur):
            cur.execute(
                _RECORD_SELECT + " WHERE a.student_id=%s ORDER BY ses.session_date DESC, ses.session_time DESC",
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with storage_errors("fetching attendance record"), db_cursor(self._db) as (_, cur):
            cur.execute(_RECORD_SELECT + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _upsert(self, cur, entry: AttendanceEntry) -> AttendanceRecord:
        # LAST_INSERT_ID(expr) makes lastrowid point at the existing row on the update branch.
        cur.execute(
            """
            INSERT INTO attendance(session_id, student_id, attendance_status, notes)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                attendance_id=LAST_INSERT_ID(attendance_id),
                attendance_status=VALUES(attendance_status),
                notes=VALUES(notes),
                updated_date=CURRENT_TIMESTAMP
            """,
            (int(entry.session_id), int(entry.student_id), entry.status.value, entry.notes),
        )

        if cur.lastrowid:
            cur.execute(_RECORD_SELECT + " WHERE a.attendance_id=%s", (int(cur.lastrowid),))
        else:
            cur.execute(
                _RECORD_SELECT + " WHERE a.session_id=%s AND a.student_id=%s",
                (int(entry.session_id), int(entry.student_id)),
            )
        r = fetchone(cur)
        if not r:
            raise PersistenceError("Error saving attendance record: row not found after write")
        return _to_record(r)

    def upsert(self, entry: AttendanceEntry) -> AttendanceRecord:
        with storage_errors(
            "saving attendance record",
            invalid_reference="Invalid session or student ID",
        ), db_cursor(self._db) as (_, cur):
            return self._upsert(cur, entry)

    def update(self, attendance_id: int, *, status: AttendanceStatus, notes: Optional[str]) -> Optional[AttendanceRecord]:
        with storage_errors("updating attendance record"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET attendance_status=%s, notes=%s, updated_date=CURRENT_TIMESTAMP
                WHERE attendance_id=%s
                """,
                (status.value, notes, int(attendance_id)),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(_RECORD_SELECT + " WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def bulk_upsert(self, entries: Sequence[AttendanceEntry]) -> Sequence[AttendanceRecord]:
        with storage_errors("bulk saving attendance records"), db_cursor(self._db) as (_, cur):
            results: list[AttendanceRecord] = []
            for position, entry in enumerate(entries, start=1):
                try:
                    results.append(self._upsert(cur, entry))
                except errors.Error as exc:
                    log.error("Bulk attendance failed at record %s of %s: %s", position, len(entries), exc)
                    raise PersistenceError(
                        f"Error bulk saving attendance records: record {position}: {exc.msg or exc}"
                    ) from exc
            return results

    def delete(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with storage_errors("deleting attendance record"), db_cursor(self._db) as (_, cur):
            cur.execute(_RECORD_SELECT + " WHERE a.attendance_id=%s FOR UPDATE", (int(attendance_id),))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute("DELETE FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return _to_record(r)

    def _count(self, cur, *, student_id: int, class_id: int) -> AttendanceCounts:
        cur.execute(
            """
            SELECT
                COUNT(*) AS total_sessions,
                COUNT(CASE WHEN a.attendance_status='PRESENT' THEN 1 END) AS present_count,
                COUNT(CASE WHEN a.attendance_status='ABSENT' THEN 1 END) AS absent_count,
                COUNT(CASE WHEN a.attendance_status='LATE' THEN 1 END) AS late_count,
                COUNT(CASE WHEN a.attendance_status='EXCUSED' THEN 1 END) AS excused_count
            FROM attendance a
            JOIN sessions ses ON ses.session_id = a.session_id
            WHERE a.student_id=%s AND ses.class_id=%s
            """,
            (int(student_id), int(class_id)),
        )
        r = fetchone(cur) or {}
        return AttendanceCounts(
            total_sessions=int(r.get("total_sessions") or 0),
            present_count=int(r.get("present_count") or 0),
            absent_count=int(r.get("absent_count") or 0),
            late_count=int(r.get("late_count") or 0),
            excused_count=int(r.get("excused_count") or 0),
        )

    def recompute_summary(self, *, student_id: int, class_id: int) -> AttendanceSummary:
        with storage_errors(
            "updating attendance summary",
            invalid_reference="Invalid student or class ID",
        ), db_cursor(self._db) as (_, cur):
            counts = self._count(cur, student_id=student_id, class_id=class_id)
            cur.execute(
                """
                INSERT INTO attendance_summary(
                    student_id, class_id, total_sessions, present_count, absent_count,
                    late_count, excused_count, attendance_rate, last_updated
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,CURRENT_TIMESTAMP)
                ON DUPLICATE KEY UPDATE
                    total_sessions=VALUES(total_sessions),
                    present_count=VALUES(present_count),
                    absent_count=VALUES(absent_count),
                    late_count=VALUES(late_count),
                    excused_count=VALUES(excused_count),
                    attendance_rate=VALUES(attendance_rate),
                    last_updated=CURRENT_TIMESTAMP
                """,
                (
                    int(student_id),
                    int(class_id),
                    counts.total_sessions,
                    counts.present_count,
                    counts.absent_count,
                    counts.late_count,
                    counts.excused_count,
                    counts.attendance_rate,
                ),
            )
            cur.execute(_SUMMARY_SELECT + " WHERE sm.student_id=%s AND sm.class_id=%s", (int(student_id), int(class_id)))
            r = fetchone(cur)
            if not r:
                raise PersistenceError("Error updating attendance summary: row not found after write")
            return _to_summary(r)

    def get_summary(self, *, student_id: int, class_id: int) -> Optional[AttendanceSummary]:
        with storage_errors("fetching attendance summary"), db_cursor(self._db) as (_, cur):
            cur.execute(_SUMMARY_SELECT + " WHERE sm.student_id=%s AND sm.class_id=%s", (int(student_id), int(class_id)))
            r = fetchone(cur)
            return _to_summary(r) if r else None

    def list_summaries(self) -> Sequence[AttendanceSummary]:
        with storage_errors("fetching attendance summary"), db_cursor(self._db) as (_, cur):
            cur.execute(_SUMMARY_SELECT + " ORDER BY sm.attendance_rate DESC, s.full_name")
            return [_to_summary(r) for r in fetchall(cur)]
