# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import AuthResult, IssuedToken, NewUser, ProfileChanges, User
from .users.exceptions import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "AuthResult",
    "EmailAlreadyInUseError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "IssuedToken",
    "NewUser",
    "ProfileChanges",
    "TokenExpiredError",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
