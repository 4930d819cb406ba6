# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from useraccounts.application.services.password_hashing import WerkzeugPasswordHasher
from useraccounts.application.services.tokens import JwtTokenService, utc_now
from useraccounts.application.use_cases.users.get_profile import GetProfileUseCase
from useraccounts.application.use_cases.users.login_user import LoginUserUseCase
from useraccounts.application.use_cases.users.register_user import RegisterUserUseCase
from useraccounts.application.use_cases.users.update_profile import UpdateProfileUseCase
from useraccounts.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from useraccounts.interfaces.http.controllers.auth_controller import AuthController
from useraccounts.interfaces.http.controllers.misc_controller import MiscController
from useraccounts.interfaces.http.controllers.profile_controller import ProfileController
from useraccounts.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        *,
        config: AppConfig | None = None,
        engine: Engine | None = None,
        session_factory: Callable[[], Session] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.config = config or load_config()
        self._engine = engine
        self._session_factory = session_factory
        self.clock = clock

    @cached_property
    def engine(self) -> Engine:
        if self._engine is not None:
            return self._engine
        from useraccounts.infrastructure.db import ENGINE

        return ENGINE

    @cached_property
    def session_factory(self) -> Callable[[], Session]:
        if self._session_factory is not None:
            return self._session_factory
        from useraccounts.infrastructure.db import SessionLocal

        return SessionLocal

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.auth.password_hash_method)

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(
            secret=self.config.secret_key,
            ttl=timedelta(seconds=self.config.auth.token_ttl_seconds),
            algorithm=self.config.auth.token_algorithm,
            clock=self.clock,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(users=self.user_repository)

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(users=self.user_repository, clock=self.clock)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
        )

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(
            tokens=self.token_service,
            get_profile_use_case=self.get_profile_use_case,
            update_profile_use_case=self.update_profile_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
