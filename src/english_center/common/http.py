from __future__ import annotations

from typing import Any

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .serialization import to_json_value


def json_response(payload: Any, status: int = 200):
    return jsonify(to_json_value(payload)), status


def json_body() -> Any:
    """Parsed JSON body, or ``ValidationError`` when it is missing or malformed."""
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be JSON")
    return data


def search_term() -> str:
    q = (request.args.get("q") or "").strip()
    if not q:
        raise ValidationError("Search term is required")
    return q
