from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import EnrollmentStatus, FeeStatus
from ..core.exceptions import DuplicateEnrollmentError
from ..database.connection import DatabaseClient
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern, storage_errors
from .model import Enrollment, EnrollmentData
from .repository import EnrollmentRepository

INVALID_REFERENCE = "Invalid student or class ID"
ALREADY_ENROLLED = "Student is already enrolled in this class"

_SELECT = """
    SELECT
        e.enrollment_id, e.student_id, e.class_id, e.enrollment_date,
        e.fee_paid, e.payment_status, e.status,
        s.full_name AS student_name,
        c.class_name,
        co.fee AS course_fee
    FROM enrollments e
    LEFT JOIN students s ON s.student_id = e.student_id
    LEFT JOIN classes c ON c.class_id = e.class_id
    LEFT JOIN courses co ON co.course_id = c.course_id
"""
_ORDER = " ORDER BY e.enrollment_date DESC, e.enrollment_id DESC"


def _to_enrollment(r: Dict[str, Any]) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        student_id=int(r["student_id"]),
        class_id=int(r["class_id"]),
        enrollment_date=r["enrollment_date"],
        fee_paid=float(r.get("fee_paid") or 0),
        payment_status=FeeStatus(r["payment_status"]),
        status=EnrollmentStatus(r["status"]),
        student_name=r.get("student_name"),
        class_name=r.get("class_name"),
        course_fee=float(r["course_fee"]) if r.get("course_fee") is not None else None,
    )


def _params(data: EnrollmentData) -> tuple:
    return (
        int(data.student_id),
        int(data.class_id),
        data.enrollment_date,
        data.fee_paid,
        data.payment_status.value,
        data.status.value,
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, db: DatabaseClient):
        self._db = db

    def _errors(self, action: str):
        return storage_errors(
            action,
            invalid_reference=INVALID_REFERENCE,
            duplicate=ALREADY_ENROLLED,
            duplicate_error=DuplicateEnrollmentError,
        )

    def _fetch(self, cur, enrollment_id: int) -> Optional[Enrollment]:
        cur.execute(_SELECT + " WHERE e.enrollment_id=%s", (int(enrollment_id),))
        r = fetchone(cur)
        return _to_enrollment(r) if r else None

    def list_all(self) -> Sequence[Enrollment]:
        with self._errors("fetching enrollments"), db_cursor(self._db) as (_, cur):
            cur.execute(_SELECT + _ORDER)
            return [_to_enrollment(r) for r in fetchall(cur)]

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        with self._errors("fetching enrollment"), db_cursor(self._db) as (_, cur):
            return self._fetch(cur, enrollment_id)

    def list_by_student(self, student_id: int) -> Sequence[Enrollment]:
        with self._errors("fetching student enrollments"), db_cursor(self._db) as (_, cur):
            cur.execute(_SELECT + " WHERE e.student_id=%s" + _ORDER, (int(student_id),))
            return [_to_enrollment(r) for r in fetchall(cur)]

    def list_by_class(self, class_id: int) -> Sequence[Enrollment]:
        with self._errors("fetching class enrollments"), db_cursor(self._db) as (_, cur):
            cur.execute(_SELECT + " WHERE e.class_id=%s" + _ORDER, (int(class_id),))
            return [_to_enrollment(r) for r in fetchall(cur)]

    def search(self, term: str) -> Sequence[Enrollment]:
        pattern = like_pattern(term)
        with self._errors("searching enrollments"), db_cursor(self._db) as (_, cur):
            cur.execute(_SELECT + " WHERE s.full_name LIKE %s OR c.class_name LIKE %s" + _ORDER, (pattern, pattern))
            return [_to_enrollment(r) for r in fetchall(cur)]

    def create(self, data: EnrollmentData) -> Enrollment:
        with self._errors("creating enrollment"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                INSERT INTO enrollments(student_id, class_id, enrollment_date, fee_paid, payment_status, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                _params(data),
            )
            return self._fetch(cur, int(cur.lastrowid))

    def update(self, enrollment_id: int, data: EnrollmentData) -> Optional[Enrollment]:
        with self._errors("updating enrollment"), db_cursor(self._db) as (_, cur):
            cur.execute(
                """
                UPDATE enrollments
                SET student_id=%s, class_id=%s, enrollment_date=%s, fee_paid=%s, payment_status=%s, status=%s
                WHERE enrollment_id=%s
                """,
                (*_params(data), int(enrollment_id)),
            )
            return self._fetch(cur, enrollment_id)

    def delete(self, enrollment_id: int) -> Optional[Enrollment]:
        with self._errors("deleting enrollment"), db_cursor(self._db) as (_, cur):
            existing = self._fetch(cur, enrollment_id)
            if not existing:
                return None
            cur.execute("DELETE FROM enrollments WHERE enrollment_id=%s", (int(enrollment_id),))
            return existing
