# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Field rules shared by the request DTOs and the client-side forms."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from pydantic_core import PydanticCustomError

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.[A-Za-z]{2,}$")
PHONE_PATTERN = re.compile(r"^\d{10,15}$")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 254


def _required(value: Any, label: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", f"{label} is required", {})


def check_username(value: str) -> str:
    _required(value, "Username")
    value = value.strip()
    if len(value) < USERNAME_MIN_LENGTH:
        raise PydanticCustomError(
            "username_too_short",
            f"Username must be at least {USERNAME_MIN_LENGTH} characters",
            {"min_length": USERNAME_MIN_LENGTH},
        )
    if len(value) > USERNAME_MAX_LENGTH:
        raise PydanticCustomError(
            "username_too_long",
            f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            {"max_length": USERNAME_MAX_LENGTH},
        )
    return value


def check_email(value: str) -> str:
    _required(value, "Email")
    value = value.strip().lower()
    if len(value) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("email_invalid", "Please enter a valid email", {})
    return value


def check_password(value: str) -> str:
    if not value:
        raise PydanticCustomError("required", "Password is required", {})
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    if len(value) > PASSWORD_MAX_LENGTH:
        raise PydanticCustomError(
            "password_too_long",
            f"Password must be at most {PASSWORD_MAX_LENGTH} characters",
            {"max_length": PASSWORD_MAX_LENGTH},
        )
    return value


def check_phone(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise PydanticCustomError(
            "phone_invalid", "Please enter a valid phone number (10-15 digits)", {}
        )
    _required(value, "Phone number")
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise PydanticCustomError(
            "phone_invalid", "Please enter a valid phone number (10-15 digits)", {}
        )
    return value


def check_dob(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    _required(value, "Date of birth")
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise PydanticCustomError("date_invalid", "Please enter a valid date", {})
