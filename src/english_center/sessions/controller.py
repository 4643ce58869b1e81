from __future__ import annotations

from flask import Flask

from ..common.crud_routes import register_crud_routes
from ..common.http import json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.session_service
    register_crud_routes(app, prefix="/api/sessions", name="session", service=service)

    @app.route("/api/sessions/class/<int:class_id>", methods=["GET"], endpoint="session_by_class")
    def session_by_class(class_id: int):
        return json_response(service.list_by_class(class_id))
