# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Error taxonomy shared by every layer.

Each error serializes to ``{"error": code, "message": ..., "context": ...}``;
the HTTP status travels alongside and never appears in the body.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    message: str | None = None
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.message:
            body["message"] = self.message
        if self.context:
            body["context"] = dict(self.context)
        return body


def _declared(error: AppError, name: str, fallback: Any) -> Any:
    # Unset slots raise AttributeError, so only subclass class attributes resolve here
    value = getattr(error, name, None)
    return fallback if value is None else value


class DomainError(AppError):
    """Business-rule violation; subclasses declare ``code``, ``status`` and ``message``."""

    def __init__(
        self,
        *,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=_declared(self, "code", "domain_error"),
            status=_declared(self, "status", HTTPStatus.BAD_REQUEST),
            message=message or _declared(self, "message", None),
            context=context,
        )


class InfrastructureError(AppError):
    """Storage or network fault. The body never carries the underlying detail."""

    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(code=code, status=status, message="Server error")


class ValidationError(AppError):
    def __init__(
        self,
        *,
        message: str = "Validation failed",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            context=context,
        )


class AuthenticationRequiredError(AppError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED, message=message)
