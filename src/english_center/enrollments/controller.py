from __future__ import annotations

from flask import Flask

from ..common.http import json_body, json_response, search_term
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.enrollment_service

    @app.route("/api/enrollments", methods=["GET"], endpoint="enrollment_list")
    def enrollment_list():
        return json_response([e.to_dict() for e in service.list_all()])

    @app.route("/api/enrollments/search", methods=["GET"], endpoint="enrollment_search")
    def enrollment_search():
        return json_response([e.to_dict() for e in service.search(search_term())])

    @app.route("/api/enrollments/student/<int:student_id>", methods=["GET"], endpoint="enrollment_by_student")
    def enrollment_by_student(student_id: int):
        return json_response([e.to_dict() for e in service.list_by_student(student_id)])

    @app.route("/api/enrollments/class/<int:class_id>", methods=["GET"], endpoint="enrollment_by_class")
    def enrollment_by_class(class_id: int):
        return json_response([e.to_dict() for e in service.list_by_class(class_id)])

    @app.route("/api/enrollments/<int:enrollment_id>", methods=["GET"], endpoint="enrollment_detail")
    def enrollment_detail(enrollment_id: int):
        return json_response(service.get(enrollment_id).to_dict())

    @app.route("/api/enrollments", methods=["POST"], endpoint="enrollment_create")
    def enrollment_create():
        return json_response(service.create(json_body()).to_dict(), 201)

    @app.route("/api/enrollments/<int:enrollment_id>", methods=["PUT"], endpoint="enrollment_update")
    def enrollment_update(enrollment_id: int):
        return json_response(service.update(enrollment_id, json_body()).to_dict())

    @app.route("/api/enrollments/<int:enrollment_id>", methods=["DELETE"], endpoint="enrollment_delete")
    def enrollment_delete(enrollment_id: int):
        deleted = service.delete(enrollment_id)
        return json_response({"message": "Enrollment deleted successfully", "enrollment": deleted.to_dict()})
