# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .api import AccountsApiClient, ApiError
from .forms import RegistrationFormDTO
from .session import ActionResult, SessionManager, SessionState, SessionStatus
from .token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "AccountsApiClient",
    "ActionResult",
    "ApiError",
    "FileTokenStore",
    "MemoryTokenStore",
    "RegistrationFormDTO",
    "SessionManager",
    "SessionState",
    "SessionStatus",
    "TokenStore",
]
