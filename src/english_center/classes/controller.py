from __future__ import annotations

from flask import Flask

from ..common.crud_routes import register_crud_routes
from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.class_service
    register_crud_routes(app, prefix="/api/classes", name="class", service=service)

    @app.route("/api/classes/<int:class_id>/update-student-count", methods=["PUT"], endpoint="class_student_count")
    def class_student_count(class_id: int):
        return json_response(service.refresh_student_count(class_id))
