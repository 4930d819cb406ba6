# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from useraccounts.interfaces.http.dto.auth import RegisterRequestDTO


class RegistrationFormDTO(RegisterRequestDTO):
    """Registration form as typed by a person: the server rules plus a confirmation."""

    confirm_password: str

    @field_validator("confirm_password")
    @classmethod
    def validate_confirmation(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise PydanticCustomError("required", "Please confirm your password", {})
        password = info.data.get("password")
        if password is not None and value != password:
            raise PydanticCustomError("password_mismatch", "Passwords do not match", {})
        return value
