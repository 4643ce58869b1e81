from __future__ import annotations

from flask import Flask

from .crud_service import CrudService
from .http import json_body, json_response, search_term


def register_crud_routes(app: Flask, *, prefix: str, name: str, service: CrudService) -> None:
    """List/search/detail/create/update/delete endpoints for one entity.

    ``name`` is the singular key used for endpoint names and delete payloads.
    """

    def list_view():
        return json_response(service.list_all())

    def search_view():
        return json_response(service.search(search_term()))

    def detail_view(record_id: int):
        return json_response(service.get(record_id))

    def create_view():
        return json_response(service.create(json_body()), 201)

    def update_view(record_id: int):
        return json_response(service.update(record_id, json_body()))

    def delete_view(record_id: int):
        row = service.delete(record_id)
        return json_response({"message": f"{service.label} deleted successfully", name: row})

    app.add_url_rule(prefix, endpoint=f"{name}_list", view_func=list_view, methods=["GET"])
    app.add_url_rule(f"{prefix}/search", endpoint=f"{name}_search", view_func=search_view, methods=["GET"])
    app.add_url_rule(f"{prefix}/<int:record_id>", endpoint=f"{name}_detail", view_func=detail_view, methods=["GET"])
    app.add_url_rule(prefix, endpoint=f"{name}_create", view_func=create_view, methods=["POST"])
    app.add_url_rule(f"{prefix}/<int:record_id>", endpoint=f"{name}_update", view_func=update_view, methods=["PUT"])
    app.add_url_rule(
        f"{prefix}/<int:record_id>", endpoint=f"{name}_delete", view_func=delete_view, methods=["DELETE"]
    )
