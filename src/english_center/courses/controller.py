from __future__ import annotations

from flask import Flask

from ..common.crud_routes import register_crud_routes
from ..container import Container


def register(app: Flask, container: Container) -> None:
    register_crud_routes(app, prefix="/api/courses", name="course", service=container.course_service)
