# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.users.get_profile import GetProfileUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.update_profile import UpdateProfileUseCase

__all__ = [
    "GetProfileUseCase",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "UpdateProfileUseCase",
]
