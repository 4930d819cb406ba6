# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from useraccounts.infrastructure.container import Container
from useraccounts.infrastructure.db import init_db
from useraccounts.shared.errors import register_error_handler
from useraccounts.shared.logging import logger, setup_logging
from useraccounts.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None, *, configure_logging: bool = True) -> Flask:
    container = container or Container()
    config = container.config

    if configure_logging:
        setup_logging(
            config.log_level,
            debug_mode=config.debug_logging,
            log_file=config.log_file,
        )
    init_db(container.engine)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key, JSON_SORT_KEYS=False)
    app.extensions["useraccounts.container"] = container

    register_error_handler(app)
    configure_request_logging(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.allowed_origins}},
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.profile_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
