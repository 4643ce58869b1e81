from __future__ import annotations

from flask import Flask

from ..common.crud_routes import register_crud_routes
from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payment_service
    register_crud_routes(app, prefix="/api/payments", name="payment", service=service)

    @app.route("/api/payments/summary", methods=["GET"], endpoint="payment_summary")
    def payment_summary():
        return json_response(service.summary())

    @app.route("/api/payments/data/students", methods=["GET"], endpoint="payment_student_options")
    def payment_student_options():
        return json_response(service.student_options())

    @app.route("/api/payments/data/enrollments", methods=["GET"], endpoint="payment_enrollment_options")
    def payment_enrollment_options():
        return json_response(service.enrollment_options())

    @app.route("/api/payments/student/<int:student_id>", methods=["GET"], endpoint="payment_by_student")
    def payment_by_student(student_id: int):
        return json_response(service.list_by_student(student_id))
