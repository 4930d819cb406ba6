# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from useraccounts.application.services.tokens import utc_now
from useraccounts.domain.users.entities import ProfileChanges, User
from useraccounts.domain.users.exceptions import EmailAlreadyInUseError, UserNotFoundError
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.shared.logging import logger


class UpdateProfileUseCase:
    """Update email, phone and date of birth of an existing user.

    The email pre-check gives a fast answer; the repository's unique index is
    what actually guarantees uniqueness when two updates race for the same
    address.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._users = users
        self._clock = clock

    def execute(self, user_id: int, *, email: str, phone: str, dob: date) -> User:
        current = self._users.find_by_id(user_id)
        if current is None:
            raise UserNotFoundError(context={"user_id": user_id})

        if email != current.email:
            owner = self._users.find_by_email(email)
            if owner is not None and owner.id != user_id:
                logger.info(f"profile.update: email taken user_id={user_id}")
                raise EmailAlreadyInUseError()

        updated = self._users.update_profile(
            user_id,
            ProfileChanges(email=email, phone=phone, dob=dob, updated_at=self._clock()),
        )
        if updated is None:
            raise UserNotFoundError(context={"user_id": user_id})

        logger.info(f"profile.update: ok user_id={user_id}")
        return updated
