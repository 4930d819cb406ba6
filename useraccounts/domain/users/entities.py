# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    password_hash: str
    phone: str
    dob: date
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True, frozen=True)
class NewUser:

    username: str
    email: str
    password_hash: str
    phone: str
    dob: date
    created_at: datetime


@dataclass(slots=True, frozen=True)
class ProfileChanges:

    email: str
    phone: str
    dob: date
    updated_at: datetime


@dataclass(slots=True, frozen=True)
class IssuedToken:

    user_id: int
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class AuthResult:

    user: User
    token: str
