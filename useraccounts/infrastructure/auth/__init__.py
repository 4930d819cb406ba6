# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .gate import AuthedRequest, auth_required, authed_request, bearer_token

__all__ = ["AuthedRequest", "auth_required", "authed_request", "bearer_token"]
