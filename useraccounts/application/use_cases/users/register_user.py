# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from useraccounts.application.services.tokens import utc_now
from useraccounts.domain.users.entities import AuthResult, NewUser
from useraccounts.domain.users.exceptions import UserAlreadyExistsError
from useraccounts.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from useraccounts.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(
        self,
        *,
        username: str,
        email: str,
        password: str,
        phone: str,
        dob: date,
    ) -> AuthResult:
        if self._users.find_by_username(username) or self._users.find_by_email(email):
            logger.info("auth.register: rejected, username or email taken")
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(password)
        persisted = self._users.add(
            NewUser(
                username=username,
                email=email,
                password_hash=hashed,
                phone=phone,
                dob=dob,
                created_at=self._clock(),
            )
        )
        issued = self._tokens.issue(persisted.id)
        logger.info(f"auth.register: ok user_id={persisted.id}")
        return AuthResult(user=persisted, token=issued.token)
