# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from useraccounts.domain.users.entities import AuthResult
from useraccounts.domain.users.exceptions import InvalidCredentialsError
from useraccounts.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from useraccounts.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, identifier: str, password: str) -> AuthResult:
        """Authenticate by username or email.

        Unknown identifiers and wrong passwords raise the same error so the
        response never tells which part was wrong.
        """

        user = self._users.find_by_username_or_email(identifier)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        if not password_valid or user is None:
            logger.info("auth.login: invalid credentials")
            raise InvalidCredentialsError()

        issued = self._tokens.issue(user.id)
        logger.info(f"auth.login: ok user_id={user.id}")
        return AuthResult(user=user, token=issued.token)
