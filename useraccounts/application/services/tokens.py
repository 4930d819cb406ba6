# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bounded session tokens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from useraccounts.domain.users.entities import IssuedToken
from useraccounts.domain.users.exceptions import InvalidTokenError, TokenExpiredError
from useraccounts.domain.users.repositories import TokenService
from useraccounts.shared.logging import logger


def utc_now() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """Issues and verifies HMAC-signed JWTs carrying ``sub``, ``iat`` and ``exp``.

    Nothing is stored server-side. Expiry is checked against the injected
    clock instead of the library's wall clock so the TTL boundary is exact
    and testable.
    """

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> IssuedToken:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        logger.debug(f"tokens.issue: user={user_id} exp={expires_at.isoformat()}")
        return IssuedToken(user_id=user_id, token=token, expires_at=expires_at)

    def verify(self, token: str) -> int:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.info(f"tokens.verify: rejected ({type(exc).__name__})")
            raise InvalidTokenError() from exc

        try:
            expires_at = datetime.fromtimestamp(int(claims["exp"]), UTC)
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc

        if self._clock() >= expires_at:
            logger.info(f"tokens.verify: expired for user={user_id}")
            raise TokenExpiredError()
        return user_id


__all__ = ["JwtTokenService", "utc_now"]
