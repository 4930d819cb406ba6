# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from useraccounts.shared.config import load_config
from useraccounts.shared.logging import logger

from .base import AppError, InfrastructureError

INTERNAL_ERROR_BODY = {"error": "internal_error", "message": "Server error"}


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def _where() -> str:
    return f"{request.method} {request.path} user={getattr(g, 'user_id', None)}"


def register_error_handler(app: Flask) -> None:
    """Map every failure to the JSON error body; 5xx bodies never carry internals."""

    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"Application error {exc.code} on {_where()}")
        else:
            logger.info(f"Handled {exc.code} ({int(exc.status)}) on {_where()}")
        return handle_app_error(exc)

    @app.errorhandler(SQLAlchemyError)
    def _handle_database(exc: SQLAlchemyError):
        logger.opt(exception=exc if debug_mode else None).error(
            f"Database error {type(exc).__name__} on {_where()}"
        )
        return handle_app_error(InfrastructureError("database_error"))

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        code = (exc.name or "http_error").lower().replace(" ", "_")
        return jsonify({"error": code, "message": exc.description}), exc.code or HTTPStatus.BAD_REQUEST

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(f"Unhandled exception on {_where()}, body_size={len(request.data)}")
        else:
            logger.opt(exception=exc).error(f"Error: {type(exc).__name__} on {_where()}")
        return jsonify(INTERNAL_ERROR_BODY), HTTPStatus.INTERNAL_SERVER_ERROR
