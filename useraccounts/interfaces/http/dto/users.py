# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from useraccounts.domain.users.entities import User


class UserDTO(BaseModel):
    id: int
    username: str
    email: str
    phone: str
    dob: date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            phone=user.phone,
            dob=user.dob,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
