from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from english_center.attendance.model import AttendanceCounts, AttendanceEntry, AttendanceRecord, AttendanceSummary
from english_center.container import build_services
from english_center.core.enums import AttendanceStatus, EnrollmentStatus
from english_center.core.exceptions import (
    ConflictError,
    DuplicateEnrollmentError,
    InvalidReferenceError,
    PersistenceError,
)
from english_center.enrollments.model import Enrollment, EnrollmentData

NOW = datetime(2026, 3, 2, 9, 0, 0)


class FakeAttendanceRepo:
    """Attendance + summary tables with the same key and FK rules as MySQL."""

    def __init__(self, *, sessions: Dict[int, int], students: Sequence[int]):
        self.sessions = dict(sessions)  # session_id -> class_id
        self.students = set(students)
        self.rows: Dict[tuple, AttendanceRecord] = {}
        self.summaries: Dict[tuple, AttendanceSummary] = {}
        self.recompute_calls: List[tuple] = []
        self.fail_bulk_at: Optional[int] = None
        self._next_id = 1

    def _record(self, entry: AttendanceEntry, existing: Optional[AttendanceRecord]) -> AttendanceRecord:
        if entry.session_id not in self.sessions or entry.student_id not in self.students:
            raise InvalidReferenceError("Invalid session or student ID")
        if existing:
            return replace(existing, status=entry.status, notes=entry.notes, updated_at=NOW)
        rid = self._next_id
        self._next_id += 1
        return AttendanceRecord(
            attendance_id=rid,
            session_id=entry.session_id,
            student_id=entry.student_id,
            status=entry.status,
            notes=entry.notes,
            created_at=NOW,
            updated_at=NOW,
            class_id=self.sessions[entry.session_id],
        )

    def list_all(self):
        return list(self.rows.values())

    def list_by_session(self, session_id):
        return [r for r in self.rows.values() if r.session_id == session_id]

    def list_by_student(self, student_id):
        return [r for r in self.rows.values() if r.student_id == student_id]

    def get_by_id(self, attendance_id):
        return next((r for r in self.rows.values() if r.attendance_id == attendance_id), None)

    def upsert(self, entry):
        key = (entry.session_id, entry.student_id)
        record = self._record(entry, self.rows.get(key))
        self.rows[key] = record
        return record

    def update(self, attendance_id, *, status, notes):
        record = self.get_by_id(attendance_id)
        if record is None:
            return None
        updated = replace(record, status=status, notes=notes, updated_at=NOW)
        self.rows[(record.session_id, record.student_id)] = updated
        return updated

    def bulk_upsert(self, entries):
        staged = dict(self.rows)
        next_id = self._next_id
        results = []
        try:
            for position, entry in enumerate(entries, start=1):
                if self.fail_bulk_at == position:
                    raise PersistenceError(f"Error bulk saving attendance records: record {position}: timeout")
                key = (entry.session_id, entry.student_id)
                try:
                    record = self._record(entry, staged.get(key))
                except InvalidReferenceError as exc:
                    raise PersistenceError(f"Error bulk saving attendance records: record {position}: {exc}") from exc
                staged[key] = record
                results.append(record)
        except PersistenceError:
            self._next_id = next_id
            raise
        self.rows = staged
        return results

    def delete(self, attendance_id):
        record = self.get_by_id(attendance_id)
        if record:
            del self.rows[(record.session_id, record.student_id)]
        return record

    def drop_session(self, session_id):
        for key in [k for k in self.rows if k[0] == session_id]:
            del self.rows[key]

    def recompute_summary(self, *, student_id, class_id):
        self.recompute_calls.append((student_id, class_id))
        rows = [
            r
            for r in self.rows.values()
            if r.student_id == student_id and self.sessions.get(r.session_id) == class_id
        ]

        def count(status):
            return sum(1 for r in rows if r.status == status)

        counts = AttendanceCounts(
            total_sessions=len(rows),
            present_count=count(AttendanceStatus.PRESENT),
            absent_count=count(AttendanceStatus.ABSENT),
            late_count=count(AttendanceStatus.LATE),
            excused_count=count(AttendanceStatus.EXCUSED),
        )
        summary = AttendanceSummary(
            student_id=student_id,
            class_id=class_id,
            total_sessions=counts.total_sessions,
            present_count=counts.present_count,
            absent_count=counts.absent_count,
            late_count=counts.late_count,
            excused_count=counts.excused_count,
            attendance_rate=counts.attendance_rate,
            last_updated=NOW,
        )
        self.summaries[(student_id, class_id)] = summary
        return summary

    def get_summary(self, *, student_id, class_id):
        return self.summaries.get((student_id, class_id))

    def list_summaries(self):
        return sorted(self.summaries.values(), key=lambda s: -s.attendance_rate)


class FakeTableRepo:
    """Dict-backed stand-in for ``MySQLTableRepository`` subclasses."""

    def __init__(self, id_column: str, rows: Sequence[Dict[str, Any]] = (), *, unique: Sequence[str] = ()):
        self.id_column = id_column
        self.unique = tuple(unique)
        self.rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        for row in rows:
            self._insert(dict(row))

    def _insert(self, row):
        rid = row.get(self.id_column) or self._next_id
        self._next_id = max(self._next_id, rid) + 1
        row[self.id_column] = rid
        self.rows[rid] = row
        return dict(row)

    def _check_unique(self, values, record_id=None):
        for column in self.unique:
            if column in values and any(
                r.get(column) == values[column] and rid != record_id for rid, r in self.rows.items()
            ):
                raise ConflictError(f"duplicate {column}")

    def list_all(self):
        return [dict(r) for r in self.rows.values()]

    def list_where(self, column, value):
        return [dict(r) for r in self.rows.values() if r.get(column) == value]

    def get_by_id(self, record_id):
        row = self.rows.get(int(record_id))
        return dict(row) if row else None

    def search(self, term):
        term = term.lower()
        return [dict(r) for r in self.rows.values() if any(term in str(v).lower() for v in r.values())]

    def create(self, values):
        self._check_unique(values)
        return self._insert(dict(values))

    def update(self, record_id, values):
        row = self.rows.get(int(record_id))
        if row is None:
            return None
        self._check_unique(values, int(record_id))
        row.update(values)
        return dict(row)

    def delete(self, record_id):
        return self.rows.pop(int(record_id), None)


class FakeClassRepo(FakeTableRepo):
    def __init__(self, rows=(), *, enrollments: Optional["FakeEnrollmentRepo"] = None):
        super().__init__("class_id", rows)
        self.enrollments = enrollments
        self.recompute_calls: List[int] = []

    def delete(self, record_id):
        if self.enrollments and self.enrollments.list_by_class(int(record_id)):
            raise ConflictError("Cannot delete class: Students are enrolled in this class")
        return super().delete(record_id)

    def recompute_occupancy(self, class_id):
        self.recompute_calls.append(class_id)
        row = self.rows.get(class_id)
        if row is None:
            return None
        active = [
            e for e in (self.enrollments.list_by_class(class_id) if self.enrollments else []) if e.is_active
        ]
        row["current_students"] = len(active)
        return len(active)


class FakeEnrollmentRepo:
    def __init__(self, *, students: Sequence[int], classes: Sequence[int]):
        self.students = set(students)
        self.classes = set(classes)
        self.rows: Dict[int, Enrollment] = {}
        self._next_id = 1

    def _check(self, data: EnrollmentData, enrollment_id=None):
        if data.student_id not in self.students or data.class_id not in self.classes:
            raise InvalidReferenceError("Invalid student or class ID")
        for e in self.rows.values():
            if (e.student_id, e.class_id) == (data.student_id, data.class_id) and e.enrollment_id != enrollment_id:
                raise DuplicateEnrollmentError("Student is already enrolled in this class")

    def _build(self, enrollment_id, data):
        return Enrollment(
            enrollment_id=enrollment_id,
            student_id=data.student_id,
            class_id=data.class_id,
            enrollment_date=data.enrollment_date,
            fee_paid=data.fee_paid,
            payment_status=data.payment_status,
            status=data.status,
        )

    def list_all(self):
        return list(self.rows.values())

    def get_by_id(self, enrollment_id):
        return self.rows.get(enrollment_id)

    def list_by_student(self, student_id):
        return [e for e in self.rows.values() if e.student_id == student_id]

    def list_by_class(self, class_id):
        return [e for e in self.rows.values() if e.class_id == class_id]

    def search(self, term):
        return []

    def create(self, data):
        self._check(data)
        enrollment = self._build(self._next_id, data)
        self._next_id += 1
        self.rows[enrollment.enrollment_id] = enrollment
        return enrollment

    def update(self, enrollment_id, data):
        if enrollment_id not in self.rows:
            return None
        self._check(data, enrollment_id)
        self.rows[enrollment_id] = self._build(enrollment_id, data)
        return self.rows[enrollment_id]

    def delete(self, enrollment_id):
        return self.rows.pop(enrollment_id, None)


class FakeSessionRepo(FakeTableRepo):
    """Session rows; deleting one cascades to its attendance like the FK does."""

    def __init__(self, rows=(), *, attendance: Optional[FakeAttendanceRepo] = None):
        super().__init__("session_id", rows)
        self.attendance = attendance

    def list_by_class(self, class_id):
        return self.list_where("class_id", class_id)

    def update(self, record_id, values):
        row = super().update(record_id, values)
        if row and self.attendance:
            self.attendance.sessions[int(record_id)] = row["class_id"]
        return row

    def delete(self, record_id):
        row = super().delete(record_id)
        if row and self.attendance:
            self.attendance.drop_session(int(record_id))
        return row


class FakeScoreRepo(FakeTableRepo):
    def __init__(self, rows=()):
        super().__init__("score_id", rows)

    def create(self, values):
        for r in self.rows.values():
            if (r["student_id"], r["test_id"]) == (values["student_id"], values["test_id"]):
                raise ConflictError("Score already exists for this student and test")
        return super().create(values)

    def list_by_student(self, student_id):
        return self.list_where("student_id", student_id)

    def list_by_test(self, test_id):
        return self.list_where("test_id", test_id)

    def totals_overview(self):
        totals = [r["total_score"] for r in self.rows.values() if r.get("total_score") is not None]
        if not totals:
            return {"total_scores": len(self.rows)}
        return {
            "total_scores": len(self.rows),
            "average_score": sum(totals) / len(totals),
            "highest_score": max(totals),
            "lowest_score": min(totals),
        }

    def grade_counts(self):
        counts: Dict[str, int] = {}
        for r in self.rows.values():
            if r.get("grade"):
                counts[r["grade"]] = counts.get(r["grade"], 0) + 1
        return counts


class FakePaymentRepo(FakeTableRepo):
    def __init__(self, rows=(), *, students: Sequence[int] = ()):
        super().__init__("payment_id", rows)
        self.students = set(students)

    def create(self, values):
        if values["student_id"] not in self.students:
            raise InvalidReferenceError("Invalid student ID")
        return super().create(values)

    def list_by_student(self, student_id):
        return self.list_where("student_id", student_id)

    def summary(self):
        return []

    def student_options(self):
        return [{"student_id": s} for s in sorted(self.students)]

    def enrollment_options(self):
        return []


class FakeDB:
    def __init__(self, healthy: bool = True):
        self.healthy = healthy

    def ping(self):
        return self.healthy


def make_world():
    """Two students, one class with two sessions; nothing recorded yet."""
    attendance = FakeAttendanceRepo(sessions={100: 10, 101: 10}, students=[1, 2])
    enrollments = FakeEnrollmentRepo(students=[1, 2], classes=[10, 11])
    classes = FakeClassRepo(
        [
            {"class_id": 10, "class_name": "IELTS A", "course_id": 1, "teacher_id": 1, "current_students": 0},
            {"class_id": 11, "class_name": "IELTS B", "course_id": 1, "teacher_id": 1, "current_students": 0},
        ],
        enrollments=enrollments,
    )
    sessions = FakeSessionRepo(
        [
            {"session_id": 100, "class_id": 10, "topic": "Listening"},
            {"session_id": 101, "class_id": 10, "topic": "Speaking"},
        ],
        attendance=attendance,
    )
    return {
        "attendance_repo": attendance,
        "enrollment_repo": enrollments,
        "class_repo": classes,
        "session_repo": sessions,
        "student_repo": FakeTableRepo(
            "student_id",
            [{"student_id": 1, "full_name": "An", "email": "an@example.com"},
             {"student_id": 2, "full_name": "Binh", "email": "binh@example.com"}],
            unique=("email",),
        ),
        "teacher_repo": FakeTableRepo("teacher_id", unique=("email",)),
        "course_repo": FakeTableRepo("course_id"),
        "test_repo": FakeTableRepo("test_id"),
        "score_repo": FakeScoreRepo(),
        "payment_repo": FakePaymentRepo(students=[1, 2]),
    }


def make_container(world=None, *, db=None, **kwargs):
    world = world or make_world()
    return build_services(db=db or FakeDB(), **world, **kwargs)


def active_enrollment(student_id, class_id, status=EnrollmentStatus.ACTIVE):
    return {"student_id": student_id, "class_id": class_id, "status": status.value}
