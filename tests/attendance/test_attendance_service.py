from __future__ import annotations

import pytest

from english_center.attendance.model import attendance_rate
from english_center.attendance.service import AttendanceService, parse_entry
from english_center.core.enums import AttendanceStatus
from english_center.core.exceptions import (
    InvalidReferenceError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from tests.fakes import FakeAttendanceRepo


@pytest.fixture
def repo():
    return FakeAttendanceRepo(sessions={10: 7, 11: 7, 12: 8}, students=[1, 2, 3])


@pytest.fixture
def service(repo):
    return AttendanceService(repo)


def test_upsert_twice_keeps_one_record_with_latest_values(service, repo):
    first = service.record({"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"})
    second = service.record({"session_id": 10, "student_id": 1, "attendance_status": "LATE", "notes": "bus"})

    assert first.attendance_id == second.attendance_id
    assert len(repo.list_by_session(10)) == 1
    assert second.status == AttendanceStatus.LATE
    assert second.notes == "bus"


def test_record_refreshes_summary_for_class_of_session(service, repo):
    service.record({"session_id": 12, "student_id": 2, "attendance_status": "present"})

    assert repo.recompute_calls == [(2, 8)]
    assert repo.get_summary(student_id=2, class_id=8).present_count == 1


def test_status_alias_is_accepted(service):
    saved = service.record({"session_id": 10, "student_id": 1, "status": "EXCUSED"})
    assert saved.status == AttendanceStatus.EXCUSED


@pytest.mark.parametrize(
    "payload",
    [
        {"student_id": 1, "attendance_status": "PRESENT"},
        {"session_id": 10, "attendance_status": "PRESENT"},
        {"session_id": 10, "student_id": 1},
        {"session_id": 10, "student_id": 1, "attendance_status": "SICK"},
        {"session_id": "ten", "student_id": 1, "attendance_status": "PRESENT"},
    ],
)
def test_invalid_single_record_is_rejected(service, repo, payload):
    with pytest.raises(ValidationError):
        service.record(payload)
    assert repo.rows == {}


def test_unknown_session_is_invalid_reference(service, repo):
    with pytest.raises(InvalidReferenceError):
        service.record({"session_id": 99, "student_id": 1, "attendance_status": "PRESENT"})
    assert repo.recompute_calls == []


def test_bulk_with_missing_field_persists_nothing(service, repo):
    batch = [
        {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
        {"session_id": 10, "student_id": 2, "attendance_status": "PRESENT"},
        {"session_id": 10, "attendance_status": "ABSENT"},
        {"session_id": 11, "student_id": 1, "attendance_status": "PRESENT"},
        {"session_id": 11, "student_id": 2, "attendance_status": "LATE"},
    ]

    with pytest.raises(ValidationError, match="in all attendance records"):
        service.bulk_record(batch)
    assert repo.rows == {}
    assert repo.recompute_calls == []


def test_bulk_storage_failure_rolls_back_whole_batch(service, repo):
    service.record({"session_id": 10, "student_id": 1, "attendance_status": "ABSENT"})
    repo.fail_bulk_at = 2

    with pytest.raises(PersistenceError, match="record 2"):
        service.bulk_record(
            [
                {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
                {"session_id": 10, "student_id": 2, "attendance_status": "PRESENT"},
            ]
        )
    assert repo.get_by_id(1).status == AttendanceStatus.ABSENT
    assert len(repo.rows) == 1


def test_bulk_unknown_reference_fails_whole_batch(service, repo):
    with pytest.raises(PersistenceError):
        service.bulk_record(
            [
                {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
                {"session_id": 10, "student_id": 42, "attendance_status": "PRESENT"},
            ]
        )
    assert repo.rows == {}


@pytest.mark.parametrize("payload, message", [({"a": 1}, "Expected an array"), ([], "cannot be empty")])
def test_bulk_requires_non_empty_array(service, payload, message):
    with pytest.raises(ValidationError, match=message):
        service.bulk_record(payload)


def test_bulk_scenario_three_students_one_session(service, repo):
    saved = service.bulk_record(
        [
            {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
            {"session_id": 10, "student_id": 2, "attendance_status": "LATE"},
            {"session_id": 10, "student_id": 3, "attendance_status": "ABSENT"},
        ]
    )

    assert len(saved) == 3
    summary = service.refresh_summary(student_id=1, class_id=7)
    assert summary.total_sessions == 1
    assert summary.present_count == 1
    assert summary.attendance_rate == 100.0


def test_bulk_refreshes_each_pair_once(service, repo):
    service.bulk_record(
        [
            {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
            {"session_id": 11, "student_id": 1, "attendance_status": "ABSENT"},
            {"session_id": 12, "student_id": 1, "attendance_status": "PRESENT"},
        ]
    )
    assert repo.recompute_calls == [(1, 7), (1, 8)]


def test_summary_counts_add_up_to_total(service, repo):
    service.bulk_record(
        [
            {"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"},
            {"session_id": 11, "student_id": 1, "attendance_status": "EXCUSED"},
        ]
    )
    s = service.get_summary(student_id=1, class_id=7)
    assert s.present_count + s.absent_count + s.late_count + s.excused_count == s.total_sessions == 2
    assert s.attendance_rate == 50.0


def test_update_changes_status_but_not_key(service):
    saved = service.record({"session_id": 10, "student_id": 1, "attendance_status": "ABSENT", "notes": "x"})

    updated = service.update_record(saved.attendance_id, {"attendance_status": "PRESENT"})
    assert updated.status == AttendanceStatus.PRESENT
    assert updated.notes == "x"

    with pytest.raises(ValidationError, match="cannot be changed"):
        service.update_record(saved.attendance_id, {"student_id": 2})


def test_update_missing_record_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_record(404, {"attendance_status": "PRESENT"})


def test_delete_refreshes_summary_to_zero(service, repo):
    saved = service.record({"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"})
    service.delete_record(saved.attendance_id)

    summary = repo.get_summary(student_id=1, class_id=7)
    assert summary.total_sessions == 0
    assert summary.attendance_rate == 0.0


def test_get_summary_missing_pair_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.get_summary(student_id=1, class_id=99)


@pytest.mark.parametrize(
    "present, late, total, expected",
    [
        (7, 1, 10, 80.0),
        (0, 0, 0, 0.0),
        (1, 0, 3, 33.33),
        (2, 0, 3, 66.67),
        (1, 0, 8, 12.5),
        (5, 5, 10, 100.0),
    ],
)
def test_attendance_rate(present, late, total, expected):
    assert attendance_rate(present, late, total) == expected


def test_parse_entry_rejects_boolean_ids():
    with pytest.raises(ValidationError):
        parse_entry({"session_id": True, "student_id": 1, "attendance_status": "PRESENT"})


class DeletedAfterReadRepo(FakeAttendanceRepo):
    """Another request deletes the row right after this one reads it."""

    def get_by_id(self, attendance_id):
        record = super().get_by_id(attendance_id)
        if record:
            self.delete(attendance_id)
        return record


def test_update_of_concurrently_deleted_record_is_not_found():
    repo = DeletedAfterReadRepo(sessions={10: 7}, students=[1])
    service = AttendanceService(repo)
    saved = repo.upsert(parse_entry({"session_id": 10, "student_id": 1, "attendance_status": "ABSENT"}))

    with pytest.raises(NotFoundError):
        service.update_record(saved.attendance_id, {"attendance_status": "PRESENT"})
    assert repo.rows == {}


def test_update_keeps_attendance_id(service, repo):
    saved = service.record({"session_id": 10, "student_id": 1, "attendance_status": "ABSENT"})
    updated = service.update_record(saved.attendance_id, {"notes": 42})

    assert updated.attendance_id == saved.attendance_id
    assert updated.notes == "42"
    assert len(repo.rows) == 1


@pytest.mark.parametrize("notes", [["a", 1], {"text": "late"}, True])
def test_structured_notes_are_rejected_on_create_and_update(service, notes):
    with pytest.raises(ValidationError, match="notes must be text"):
        service.record({"session_id": 10, "student_id": 1, "attendance_status": "PRESENT", "notes": notes})

    saved = service.record({"session_id": 10, "student_id": 1, "attendance_status": "PRESENT"})
    with pytest.raises(ValidationError, match="notes must be text"):
        service.update_record(saved.attendance_id, {"notes": notes})
