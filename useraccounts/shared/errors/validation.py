# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_FIELD_LABELS = {
    "username": "Username",
    "email": "Email",
    "password": "Password",
    "confirm_password": "Password confirmation",
    "phone": "Phone number",
    "dob": "Date of birth",
}


@dataclass(slots=True, frozen=True)
class FieldError:
    field: str
    message: str
    type: str = "value_error"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message, "type": self.type}


def _message_for(field: str, error: Mapping[str, Any]) -> str:
    if error.get("type") == "missing":
        return f"{_FIELD_LABELS.get(field, field.capitalize())} is required"
    return str(error.get("msg", "Invalid value"))


def field_errors_from(exc: PydanticValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None) or "unknown"
        errors.append(
            FieldError(
                field=field_path,
                message=_message_for(field_path, error),
                type=error.get("type", "value_error"),
            )
        )
    return errors


NOT_AN_OBJECT = FieldError(
    field="body", message="Request body must be a JSON object", type="model_type"
)


def collect_field_errors(model: type[BaseModel], payload: Any) -> list[FieldError]:
    """Run the declarative field rules of ``model`` and return every violation.

    Usable without any HTTP machinery; an empty list means the payload is valid.
    """

    if not isinstance(payload, Mapping):
        return [NOT_AN_OBJECT]
    try:
        model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        return field_errors_from(exc)
    return []


def format_field_errors(errors: list[FieldError]) -> dict[str, Any]:
    return {
        "fields": sorted({error.field for error in errors}),
        "errors": [error.to_dict() for error in errors],
    }


def raise_validation_error(exc: PydanticValidationError) -> None:
    errors = field_errors_from(exc)
    message = "; ".join(error.message for error in errors) or "Validation failed"
    raise ValidationError(message=message, context=format_field_errors(errors)) from exc


def parse_payload(model: type[ModelT], payload: Any) -> ModelT:
    # A missing or undecodable body validates as empty so every required field is reported
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError(
            message=NOT_AN_OBJECT.message, context=format_field_errors([NOT_AN_OBJECT])
        )
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise_validation_error(exc)
        raise  # pragma: no cover


__all__ = [
    "FieldError",
    "collect_field_errors",
    "field_errors_from",
    "format_field_errors",
    "parse_payload",
    "raise_validation_error",
]
