# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, field_validator

from .fields import check_dob, check_email, check_phone
from .users import UserDTO


class ProfileUpdateRequestDTO(BaseModel):
    """Mutable profile fields. Username and password are not accepted here."""

    email: str
    phone: str
    dob: date

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, value: Any) -> str:
        return check_phone(value)

    @field_validator("dob", mode="before")
    @classmethod
    def validate_dob(cls, value: Any) -> date:
        return check_dob(value)


class ProfileUpdateResponseDTO(BaseModel):
    message: str = "Profile updated successfully"
    user: UserDTO
