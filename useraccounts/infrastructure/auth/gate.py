# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-token gate shared by every protected endpoint."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import Request, g, request

from useraccounts.domain.users.repositories import TokenService
from useraccounts.shared.errors import AuthenticationRequiredError
from useraccounts.shared.logging import logger, set_user_id

F = TypeVar("F", bound=Callable[..., Any])


class AuthedRequest(Request):
    user_id: int


def authed_request() -> AuthedRequest:
    """Return the current request cast to include authentication attributes."""
    return cast(AuthedRequest, request)


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return value.strip()


def auth_required(tokens: TokenService) -> Callable[[F], F]:
    """Reject the request with 401 unless it carries a valid bearer token.

    Verification failures propagate as ``InvalidTokenError`` and friends; the
    handler only runs with ``request.user_id`` set.
    """

    def decorator(f: F) -> F:
        @wraps(f)
        def inner(*a, **kw):
            token = bearer_token()
            if not token:
                logger.warning(f"No bearer token on {request.method} {request.path}")
                raise AuthenticationRequiredError()

            user_id = tokens.verify(token)
            request.user_id = user_id  # type: ignore[attr-defined]
            g.user_id = user_id
            set_user_id(user_id)
            logger.debug(f"Auth OK: user={user_id} {request.method} {request.path}")
            return f(*a, **kw)

        return cast(F, inner)

    return decorator
