# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Thin async client for the accounts REST API."""

from __future__ import annotations

from typing import Any

import httpx

from useraccounts.shared.errors.validation import FieldError
from useraccounts.shared.logging import logger


class ApiError(Exception):
    """Non-2xx answer or transport failure. ``status`` is None when no answer arrived."""

    def __init__(
        self,
        status: int | None,
        code: str,
        message: str | None = None,
        field_errors: tuple[FieldError, ...] = (),
    ) -> None:
        super().__init__(message or code)
        self.status = status
        self.code = code
        self.message = message
        self.field_errors = field_errors

    @property
    def is_unauthenticated(self) -> bool:
        return self.status in (401, 404)

    @property
    def is_server_error(self) -> bool:
        return self.status is None or self.status >= 500


def _error_from_response(response: httpx.Response) -> ApiError:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return ApiError(response.status_code, "http_error")

    context = payload.get("context") or {}
    field_errors = tuple(
        FieldError(
            field=str(item.get("field", "unknown")),
            message=str(item.get("message", "")),
            type=str(item.get("type", "value_error")),
        )
        for item in (context.get("errors") or [])
        if isinstance(item, dict)
    )
    return ApiError(
        response.status_code,
        str(payload.get("error", "http_error")),
        payload.get("message"),
        field_errors,
    )


class AccountsApiClient:
    """Every call takes the token explicitly; the client keeps no auth state."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as http:
                response = await http.request(method, path, headers=headers, json=json)
        except httpx.TimeoutException as exc:
            logger.warning(f"api: {method} {path} timed out")
            raise ApiError(None, "timeout", "Request timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"api: {method} {path} transport error {type(exc).__name__}")
            raise ApiError(None, "transport_error") from exc

        if response.is_success:
            try:
                payload = response.json()
            except ValueError as exc:
                logger.warning(f"api: {method} {path} -> {response.status_code} body is not JSON")
                raise ApiError(response.status_code, "invalid_response") from exc
            if not isinstance(payload, dict):
                logger.warning(f"api: {method} {path} -> {response.status_code} body is not an object")
                raise ApiError(response.status_code, "invalid_response")
            return payload

        error = _error_from_response(response)
        logger.info(f"api: {method} {path} -> {response.status_code} {error.code}")
        raise error

    async def register(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/api/auth/register", json=data)

    async def login(self, username: str, password: str) -> dict[str, Any]:
        return await self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )

    async def get_profile(self, token: str | None) -> dict[str, Any]:
        return await self._request("GET", "/api/user/profile", token=token)

    async def update_profile(self, token: str | None, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", "/api/user/profile", token=token, json=data)
