# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from useraccounts.application.use_cases.users.get_profile import GetProfileUseCase
from useraccounts.application.use_cases.users.update_profile import UpdateProfileUseCase
from useraccounts.domain.users.repositories import TokenService
from useraccounts.infrastructure.auth import auth_required, authed_request
from useraccounts.interfaces.http.dto.profile import (ProfileUpdateRequestDTO,
                                                      ProfileUpdateResponseDTO)
from useraccounts.interfaces.http.dto.users import UserDTO
from useraccounts.shared.errors import parse_payload


class ProfileController:
    def __init__(
        self,
        *,
        tokens: TokenService,
        get_profile_use_case: GetProfileUseCase,
        update_profile_use_case: UpdateProfileUseCase,
    ) -> None:
        self._tokens = tokens
        self._get_profile_use_case = get_profile_use_case
        self._update_profile_use_case = update_profile_use_case

    def get_profile(self) -> tuple[Response, int]:
        user = self._get_profile_use_case.execute(authed_request().user_id)
        return jsonify(UserDTO.from_domain(user).model_dump(mode="json")), 200

    def update_profile(self) -> tuple[Response, int]:
        dto = parse_payload(ProfileUpdateRequestDTO, request.get_json(silent=True))

        user = self._update_profile_use_case.execute(
            authed_request().user_id,
            email=dto.email,
            phone=dto.phone,
            dob=dto.dob,
        )

        payload = ProfileUpdateResponseDTO(user=UserDTO.from_domain(user))
        return jsonify(payload.model_dump(mode="json")), 200

    def as_blueprint(self) -> Blueprint:
        guard = auth_required(self._tokens)
        bp = Blueprint("user", __name__, url_prefix="/api/user")
        bp.add_url_rule(
            "/profile",
            view_func=guard(self.get_profile),
            methods=["GET"],
            endpoint="profile_get",
        )
        bp.add_url_rule(
            "/profile",
            view_func=guard(self.update_profile),
            methods=["PUT"],
            endpoint="profile_update",
        )
        return bp
