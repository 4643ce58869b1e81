from __future__ import annotations

import logging
from time import perf_counter
from typing import Any

from flask import Flask, g, request

from .app_logger import get_logger
from .core.constants import SENSITIVE_BODY_FIELDS

log = get_logger("requests")

_BODY_METHODS = {"POST", "PUT", "PATCH"}


def redact(body: Any) -> Any:
    """Copy of a JSON body with credential-like fields removed (recursively)."""
    if isinstance(body, dict):
        return {k: redact(v) for k, v in body.items() if k not in SENSITIVE_BODY_FIELDS}
    if isinstance(body, list):
        return [redact(v) for v in body]
    return body


def attach_request_logging(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = perf_counter()
        if request.method in _BODY_METHODS and log.isEnabledFor(logging.DEBUG):
            body = request.get_json(silent=True)
            if body is not None:
                log.debug("%s %s body=%s", request.method, request.path, redact(body))

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        ms = (perf_counter() - started) * 1000.0 if started is not None else 0.0
        log.info(
            "%s %s -> %s (%0.2f ms) ip=%s",
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            ms,
            request.remote_addr or "-",
        )
        return response
