# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from useraccounts.domain.users.entities import NewUser, ProfileChanges
from useraccounts.domain.users.entities import User as DomainUser
from useraccounts.domain.users.exceptions import EmailAlreadyInUseError, UserAlreadyExistsError
from useraccounts.domain.users.repositories import UserRepository
from useraccounts.infrastructure.db.models import User
from useraccounts.infrastructure.unit_of_work import unit_of_work_scope
from useraccounts.shared.logging import logger


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True) columns
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        phone=row.phone,
        dob=row.dob,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.query(User).filter(User.email == email.strip().lower()).first()
            return _to_domain(row) if row else None

    def find_by_username_or_email(self, identifier: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = (
                session.query(User).filter(User.username == identifier).first()
                or session.query(User)
                .filter(User.email == identifier.strip().lower())
                .first()
            )
            return _to_domain(row) if row else None

    def add(self, user: NewUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    phone=user.phone,
                    dob=user.dob,
                    created_at=user.created_at,
                    updated_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info("users.add: unique constraint violated")
            raise UserAlreadyExistsError() from exc

    def update_profile(self, user_id: int, changes: ProfileChanges) -> DomainUser | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = session.get(User, user_id)
                if row is None:
                    return None
                row.email = changes.email
                row.phone = changes.phone
                row.dob = changes.dob
                row.updated_at = changes.updated_at
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.update_profile: email constraint violated user_id={user_id}")
            raise EmailAlreadyInUseError() from exc
