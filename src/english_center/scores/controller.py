from __future__ import annotations

from flask import Flask

from ..common.crud_routes import register_crud_routes
from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.score_service

    @app.route("/api/scores/statistics", methods=["GET"], endpoint="score_statistics")
    def score_statistics():
        return json_response(service.statistics())

    @app.route("/api/scores/student/<int:student_id>", methods=["GET"], endpoint="score_by_student")
    def score_by_student(student_id: int):
        return json_response(service.list_by_student(student_id))

    @app.route("/api/scores/test/<int:test_id>", methods=["GET"], endpoint="score_by_test")
    def score_by_test(test_id: int):
        return json_response(service.list_by_test(test_id))

    register_crud_routes(app, prefix="/api/scores", name="score", service=service)
