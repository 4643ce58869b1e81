from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, json_response
from ..common.validators import is_blank, require_int
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendances", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        session_id = request.args.get("session_id")
        session_id = None if is_blank(session_id) else require_int(session_id, "session_id")
        records = service.list_records(session_id=session_id)
        return json_response([r.to_dict() for r in records])

    @app.route("/api/attendances/summary", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary():
        student_id = request.args.get("student_id")
        class_id = request.args.get("class_id")
        if is_blank(student_id) != is_blank(class_id):
            raise ValidationError("student_id and class_id must be given together")
        if not is_blank(student_id):
            summary = service.get_summary(
                student_id=require_int(student_id, "student_id"),
                class_id=require_int(class_id, "class_id"),
            )
            return json_response(summary.to_dict())
        return json_response([s.to_dict() for s in service.list_summaries()])

    @app.route(
        "/api/attendances/summary/<int:student_id>/<int:class_id>",
        methods=["PUT"],
        endpoint="attendance_summary_refresh",
    )
    def attendance_summary_refresh(student_id: int, class_id: int):
        summary = service.refresh_summary(student_id=student_id, class_id=class_id)
        return json_response(summary.to_dict())

    @app.route("/api/attendances/session/<int:session_id>", methods=["GET"], endpoint="attendance_by_session")
    def attendance_by_session(session_id: int):
        return json_response([r.to_dict() for r in service.list_records(session_id=session_id)])

    @app.route("/api/attendances/student/<int:student_id>", methods=["GET"], endpoint="attendance_by_student")
    def attendance_by_student(student_id: int):
        return json_response([r.to_dict() for r in service.list_by_student(student_id)])

    @app.route("/api/attendances/<int:attendance_id>", methods=["GET"], endpoint="attendance_detail")
    def attendance_detail(attendance_id: int):
        return json_response(service.get_record(attendance_id).to_dict())

    @app.route("/api/attendances", methods=["POST"], endpoint="attendance_create")
    def attendance_create():
        record = service.record(json_body())
        return json_response(record.to_dict(), 201)

    @app.route("/api/attendances/bulk", methods=["POST"], endpoint="attendance_bulk")
    def attendance_bulk():
        records = service.bulk_record(json_body())
        return json_response([r.to_dict() for r in records])

    @app.route("/api/attendances/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    def attendance_update(attendance_id: int):
        record = service.update_record(attendance_id, json_body())
        return json_response(record.to_dict())

    @app.route("/api/attendances/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        deleted = service.delete_record(attendance_id)
        return json_response({"message": "Attendance record deleted successfully", "attendance": deleted.to_dict()})
