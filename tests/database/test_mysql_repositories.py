from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from mysql.connector import errorcode, errors

from english_center.attendance.model import AttendanceEntry
from english_center.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from english_center.classes.mysql_class_repository import MySQLClassRepository
from english_center.core.enums import AttendanceStatus
from english_center.core.exceptions import ConflictError, InvalidReferenceError, PersistenceError

NOW = datetime(2026, 3, 2, 9, 0, 0)


def make_client():
    client = MagicMock()
    conn = client.connect.return_value
    return client, conn, conn.cursor.return_value


def attendance_row(attendance_id, session_id, student_id, status="PRESENT"):
    return {
        "attendance_id": attendance_id,
        "session_id": session_id,
        "student_id": student_id,
        "attendance_status": status,
        "notes": None,
        "created_date": NOW,
        "updated_date": NOW,
        "class_id": 7,
        "student_name": "An",
    }


def entry(student_id, status=AttendanceStatus.PRESENT):
    return AttendanceEntry(session_id=10, student_id=student_id, status=status)


def test_upsert_is_one_statement_keyed_on_session_and_student():
    client, conn, cur = make_client()
    cur.lastrowid = 5
    cur.fetchone.return_value = attendance_row(5, 10, 1, "LATE")

    record = MySQLAttendanceRepository(client).upsert(entry(1, AttendanceStatus.LATE))

    upsert_sql, params = cur.execute.call_args_list[0].args
    assert "ON DUPLICATE KEY UPDATE" in upsert_sql
    assert params == (10, 1, "LATE", None)
    assert record.attendance_id == 5
    assert record.class_id == 7
    conn.commit.assert_called_once()


def test_upsert_unknown_reference():
    client, conn, cur = make_client()
    cur.execute.side_effect = errors.IntegrityError(msg="fk", errno=errorcode.ER_NO_REFERENCED_ROW_2)

    with pytest.raises(InvalidReferenceError, match="Invalid session or student ID"):
        MySQLAttendanceRepository(client).upsert(entry(99))
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()


def test_bulk_failure_rolls_back_and_names_record():
    client, conn, cur = make_client()
    cur.lastrowid = 1
    cur.fetchone.return_value = attendance_row(1, 10, 1)
    inserts = []

    def execute(sql, params=None):
        if sql.lstrip().startswith("INSERT"):
            inserts.append(params)
            if len(inserts) == 3:
                raise errors.OperationalError(msg="Lock wait timeout exceeded", errno=errorcode.ER_LOCK_WAIT_TIMEOUT)

    cur.execute.side_effect = execute

    with pytest.raises(PersistenceError, match="record 3: Lock wait timeout exceeded"):
        MySQLAttendanceRepository(client).bulk_upsert([entry(1), entry(2), entry(3), entry(4)])

    assert len(inserts) == 3
    client.connect.assert_called_once()
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()


def test_bulk_success_commits_once():
    client, conn, cur = make_client()
    cur.lastrowid = 1
    cur.fetchone.return_value = attendance_row(1, 10, 1)

    saved = MySQLAttendanceRepository(client).bulk_upsert([entry(1), entry(2)])

    assert len(saved) == 2
    client.connect.assert_called_once()
    conn.commit.assert_called_once()


def test_recompute_summary_writes_rate():
    client, _, cur = make_client()
    cur.fetchone.side_effect = [
        {"total_sessions": 10, "present_count": 7, "absent_count": 2, "late_count": 1, "excused_count": 0},
        {
            "student_id": 1,
            "student_name": "An",
            "class_id": 7,
            "class_name": "IELTS A",
            "total_sessions": 10,
            "present_count": 7,
            "absent_count": 2,
            "late_count": 1,
            "excused_count": 0,
            "attendance_rate": 80,
            "last_updated": NOW,
        },
    ]

    summary = MySQLAttendanceRepository(client).recompute_summary(student_id=1, class_id=7)

    write_sql, params = cur.execute.call_args_list[1].args
    assert "INSERT INTO attendance_summary" in write_sql
    assert params[2:] == (10, 7, 2, 1, 0, 80.0)
    assert summary.attendance_rate == 80.0


def test_recompute_occupancy_counts_active_enrollments():
    client, _, cur = make_client()
    cur.fetchone.return_value = {"current_students": 3}

    assert MySQLClassRepository(client).recompute_occupancy(10) == 3

    update_sql, params = cur.execute.call_args_list[0].args
    assert "status='ACTIVE'" in update_sql
    assert params == (10, 10)


def test_recompute_occupancy_missing_class():
    client, _, cur = make_client()
    cur.fetchone.return_value = None

    assert MySQLClassRepository(client).recompute_occupancy(10) is None


def test_class_delete_with_enrollments_is_conflict():
    client, conn, cur = make_client()
    cur.fetchone.side_effect = [{"class_id": 10, "class_name": "IELTS A"}, {"n": 2}]

    with pytest.raises(ConflictError, match="Students are enrolled"):
        MySQLClassRepository(client).delete(10)
    conn.rollback.assert_called_once()
    assert not any("DELETE" in c.args[0] for c in cur.execute.call_args_list)


def test_update_by_id_is_one_transaction_and_never_inserts():
    client, conn, cur = make_client()
    cur.rowcount = 1
    cur.fetchone.return_value = attendance_row(5, 10, 1, "EXCUSED")

    record = MySQLAttendanceRepository(client).update(5, status=AttendanceStatus.EXCUSED, notes="doctor")

    update_sql, params = cur.execute.call_args_list[0].args
    assert update_sql.lstrip().startswith("UPDATE attendance")
    assert params == ("EXCUSED", "doctor", 5)
    assert not any("INSERT" in c.args[0] for c in cur.execute.call_args_list)
    assert record.status == AttendanceStatus.EXCUSED
    client.connect.assert_called_once()
    conn.commit.assert_called_once()


def test_update_of_missing_row_returns_none():
    client, _, cur = make_client()
    cur.rowcount = 0

    assert MySQLAttendanceRepository(client).update(5, status=AttendanceStatus.PRESENT, notes=None) is None
    assert cur.execute.call_count == 1
