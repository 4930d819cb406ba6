# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Durable storage for the single session token a client holds."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from useraccounts.shared.logging import logger


class TokenStore(Protocol):
    def load(self) -> str | None: ...
    def save(self, token: str) -> None: ...
    def clear(self) -> None: ...


class FileTokenStore(TokenStore):
    """Keeps the token in a user-only readable file so it survives restarts."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(token)
        os.replace(tmp, self._path)
        logger.debug(f"token_store: saved to {self._path}")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
        logger.debug(f"token_store: cleared {self._path}")


class MemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
