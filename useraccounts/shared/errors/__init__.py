# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    AuthenticationRequiredError,
    DomainError,
    InfrastructureError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler
from .validation import FieldError, collect_field_errors, parse_payload

__all__ = [
    "AppError",
    "AuthenticationRequiredError",
    "DomainError",
    "FieldError",
    "InfrastructureError",
    "ValidationError",
    "collect_field_errors",
    "handle_app_error",
    "parse_payload",
    "register_error_handler",
]
