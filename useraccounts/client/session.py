# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client-side session state and its transitions.

One ``SessionManager`` per client. UI components receive it explicitly and
subscribe to state changes instead of reaching for a global.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from useraccounts.client.api import AccountsApiClient, ApiError
from useraccounts.client.forms import RegistrationFormDTO
from useraccounts.client.token_store import FileTokenStore, TokenStore
from useraccounts.interfaces.http.dto.auth import LoginRequestDTO, RegisterRequestDTO
from useraccounts.interfaces.http.dto.profile import ProfileUpdateRequestDTO
from useraccounts.interfaces.http.dto.users import UserDTO
from useraccounts.shared.config import AppConfig, load_config
from useraccounts.shared.errors.validation import FieldError, collect_field_errors
from useraccounts.shared.logging import logger

BUSY_MESSAGE = "Another request is already in progress"


class SessionStatus(str, Enum):
    LOADING = "loading"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(slots=True, frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.LOADING
    user: UserDTO | None = None
    token: str | None = None
    busy: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.LOADING


@dataclass(slots=True, frozen=True)
class ActionResult:
    success: bool
    message: str | None = None
    error: str | None = None
    field_errors: tuple[FieldError, ...] = ()


Listener = Callable[[SessionState], None]


def _dump_date(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else value


class SessionManager:
    def __init__(self, *, api: AccountsApiClient, store: TokenStore) -> None:
        self._api = api
        self._store = store
        self._state = SessionState()
        self._listeners: list[Listener] = []

    @classmethod
    def from_config(cls, config: AppConfig | None = None) -> SessionManager:
        config = config or load_config()
        return cls(
            api=AccountsApiClient(config.client.api_url, timeout=config.client.timeout),
            store=FileTokenStore(config.client.token_file),
        )

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    def _authenticate(self, token: str, user: UserDTO) -> None:
        self._store.save(token)
        self._set(status=SessionStatus.AUTHENTICATED, token=token, user=user)

    def _drop_session(self) -> None:
        self._store.clear()
        self._set(status=SessionStatus.ANONYMOUS, token=None, user=None)

    def _still_holds(self, token: str | None) -> bool:
        # A response only applies to the session that sent the request
        return self._state.is_authenticated and self._state.token == token

    @staticmethod
    def _invalid(errors: list[FieldError]) -> ActionResult:
        return ActionResult(
            success=False,
            error="; ".join(error.message for error in errors),
            field_errors=tuple(errors),
        )

    @staticmethod
    def _failed(exc: ApiError, fallback: str) -> ActionResult:
        # Server faults and transport errors never leak details to the user
        message = fallback if exc.is_server_error else (exc.message or fallback)
        return ActionResult(success=False, error=message, field_errors=exc.field_errors)

    async def start(self) -> SessionState:
        """Hydrate from the persisted token; any failure leaves the session anonymous."""

        token = self._store.load()
        if not token:
            self._set(status=SessionStatus.ANONYMOUS, token=None, user=None)
            return self._state

        self._set(status=SessionStatus.LOADING, token=token)
        try:
            payload = await self._api.get_profile(token)
            user = UserDTO.model_validate(payload)
        except (ApiError, PydanticValidationError) as exc:
            logger.info(f"session.start: stored token rejected ({type(exc).__name__})")
            self._drop_session()
            return self._state

        self._set(status=SessionStatus.AUTHENTICATED, user=user)
        return self._state

    async def _run_auth(
        self,
        call: Callable[[], Any],
        fallback: str,
    ) -> ActionResult:
        if self._state.busy:
            return ActionResult(success=False, error=BUSY_MESSAGE)

        self._set(busy=True)
        try:
            payload = await call()
            user = UserDTO.model_validate(payload["user"])
            token = str(payload["token"])
        except ApiError as exc:
            return self._failed(exc, fallback)
        except (KeyError, TypeError, PydanticValidationError):
            logger.warning("session: malformed auth response")
            return ActionResult(success=False, error=fallback)
        finally:
            self._set(busy=False)

        self._authenticate(token, user)
        return ActionResult(success=True)

    async def login(self, username: str, password: str) -> ActionResult:
        form = {"username": username, "password": password}
        errors = collect_field_errors(LoginRequestDTO, form)
        if errors:
            return self._invalid(errors)

        return await self._run_auth(
            lambda: self._api.login(username.strip(), password), "Login failed"
        )

    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        phone: str,
        dob: date | str,
        confirm_password: str | None = None,
    ) -> ActionResult:
        data = {
            "username": username,
            "email": email,
            "password": password,
            "phone": phone,
            "dob": _dump_date(dob),
        }
        model: type[BaseModel] = RegisterRequestDTO
        form: dict[str, Any] = dict(data)
        if confirm_password is not None:
            model = RegistrationFormDTO
            form["confirm_password"] = confirm_password
        errors = collect_field_errors(model, form)
        if errors:
            return self._invalid(errors)

        return await self._run_auth(lambda: self._api.register(data), "Registration failed")

    async def update_profile(self, *, email: str, phone: str, dob: date | str) -> ActionResult:
        data = {"email": email, "phone": phone, "dob": _dump_date(dob)}
        errors = collect_field_errors(ProfileUpdateRequestDTO, data)
        if errors:
            return self._invalid(errors)

        if self._state.busy:
            return ActionResult(success=False, error=BUSY_MESSAGE)

        token = self._state.token
        self._set(busy=True)
        try:
            payload = await self._api.update_profile(token, data)
            user = UserDTO.model_validate(payload["user"])
        except ApiError as exc:
            if exc.is_unauthenticated and self._still_holds(token):
                self._drop_session()
            return self._failed(exc, "Update failed")
        except (KeyError, TypeError, PydanticValidationError):
            logger.warning("session: malformed profile response")
            return ActionResult(success=False, error="Update failed")
        finally:
            self._set(busy=False)

        if not self._still_holds(token):
            logger.info("session: profile update finished after the session ended")
            return ActionResult(success=False, error="Update failed")
        self._set(user=user)
        return ActionResult(success=True, message=payload.get("message"))

    async def refresh_profile(self) -> ActionResult:
        token = self._state.token
        try:
            payload = await self._api.get_profile(token)
            user = UserDTO.model_validate(payload)
        except ApiError as exc:
            if exc.is_unauthenticated and self._still_holds(token):
                self._drop_session()
            return self._failed(exc, "Could not load profile")
        except PydanticValidationError:
            return ActionResult(success=False, error="Could not load profile")

        if not self._still_holds(token):
            return ActionResult(success=False, error="Could not load profile")
        self._set(user=user)
        return ActionResult(success=True)

    def logout(self) -> None:
        """Forget the session locally; the server keeps no session to revoke."""

        self._drop_session()
        logger.info("session: logged out")
