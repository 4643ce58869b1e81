from __future__ import annotations

from flask import Flask, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .app_logger import get_logger
from .core.exceptions import DomainError, StorageUnavailableError

log = get_logger("http")


def register_error_handlers(app: Flask) -> None:
    def domain_error(exc: DomainError):
        if isinstance(exc, StorageUnavailableError):
            return jsonify({"error": "Storage unavailable"}), exc.status_code
        return jsonify({"error": str(exc)}), exc.status_code

    def http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code

    def unexpected_error(exc: Exception):
        log.exception("Unhandled error: %s", exc)
        message = str(exc) if current_app.debug else "Something went wrong"
        return jsonify({"error": message}), 500

    app.register_error_handler(DomainError, domain_error)
    app.register_error_handler(HTTPException, http_error)
    app.register_error_handler(Exception, unexpected_error)
