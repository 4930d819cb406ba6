# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-request correlation ids and access logging.

The ``X-Request-ID`` header is honoured when the caller sends one so client and
server logs can be joined; otherwise a short random id is generated.
"""

from __future__ import annotations

import secrets
import time

from flask import Flask, Response, g, request

from useraccounts.shared.config import load_config
from useraccounts.shared.logging import (clear_correlation_id, logger, sanitize_mapping,
                                         set_correlation_id)

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_REQUEST_ID_LENGTH = 64
_HIDDEN_HEADERS = {"authorization", "cookie"}


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _incoming_request_id() -> str:
    value = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if value and len(value) <= _MAX_REQUEST_ID_LENGTH and value.isprintable():
        return value
    return secrets.token_urlsafe(8)


def _debug_details() -> str:
    headers = {
        key: ("<present>" if key.lower() in _HIDDEN_HEADERS else value)
        for key, value in request.headers.items()
    }
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return f"headers={headers}, body={sanitize_mapping(body)}"
    return f"headers={headers}, body_size={request.content_length or 0}"


def configure_request_logging(app: Flask) -> None:
    debug_mode = load_config().debug_logging

    @app.before_request
    def _before_request() -> None:
        correlation_id = _incoming_request_id()
        set_correlation_id(correlation_id)
        g.correlation_id = correlation_id
        g.request_start_time = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"Request started: {request.method} {request.path} from {_client_ip()}, "
                f"{_debug_details()}"
            )
        else:
            logger.info(f"Request: {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _after_request(response: Response) -> Response:
        duration = time.perf_counter() - getattr(g, "request_start_time", time.perf_counter())
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code}, duration={duration:.3f}s, "
            f"user={getattr(g, 'user_id', None)}"
        )
        response.headers.setdefault(REQUEST_ID_HEADER, getattr(g, "correlation_id", "-"))
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["configure_request_logging", "REQUEST_ID_HEADER"]
