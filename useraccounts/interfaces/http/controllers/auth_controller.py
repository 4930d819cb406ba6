# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from useraccounts.application.use_cases.users.login_user import LoginUserUseCase
from useraccounts.application.use_cases.users.register_user import RegisterUserUseCase
from useraccounts.domain.users.entities import AuthResult
from useraccounts.interfaces.http.dto.auth import (AuthResponseDTO, LoginRequestDTO,
                                                   RegisterRequestDTO)
from useraccounts.interfaces.http.dto.users import UserDTO
from useraccounts.shared.errors import parse_payload
from useraccounts.shared.logging import logger


def _auth_response(result: AuthResult) -> Response:
    payload = AuthResponseDTO(token=result.token, user=UserDTO.from_domain(result.user))
    return jsonify(payload.model_dump(mode="json"))


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case

    def register(self) -> tuple[Response, int]:
        dto = parse_payload(RegisterRequestDTO, request.get_json(silent=True))

        result = self._register_use_case.execute(
            username=dto.username,
            email=dto.email,
            password=dto.password,
            phone=dto.phone,
            dob=dto.dob,
        )

        logger.info(f"auth.register: responded user_id={result.user.id}")
        return _auth_response(result), 200

    def login(self) -> tuple[Response, int]:
        dto = parse_payload(LoginRequestDTO, request.get_json(silent=True))

        result = self._login_use_case.execute(dto.username, dto.password)

        logger.info(f"auth.login: responded user_id={result.user.id}")
        return _auth_response(result), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        return bp
