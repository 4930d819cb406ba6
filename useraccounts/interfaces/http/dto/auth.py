# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from .fields import check_dob, check_email, check_password, check_phone, check_username
from .users import UserDTO


class RegisterRequestDTO(BaseModel):
    username: str
    email: str
    password: str
    phone: str
    dob: date

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return check_username(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password(value)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, value: Any) -> str:
        return check_phone(value)

    @field_validator("dob", mode="before")
    @classmethod
    def validate_dob(cls, value: Any) -> date:
        return check_dob(value)


class LoginRequestDTO(BaseModel):
    # Username or email; both resolve through the same lookup
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Username is required", {})
        return value.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("required", "Password is required", {})
        return value


class AuthResponseDTO(BaseModel):
    token: str
    user: UserDTO
