# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Masking of credentials and personal data before a record reaches any sink."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "***REDACTED***"

# Keys whose values are never logged, in payloads or key=value text
SECRET_KEYS = ("password", "confirm_password", "token", "secret_key", "authorization")
# Personal data is masked rather than dropped so records stay correlatable
PERSONAL_KEYS = ("phone", "dob")

_KEY_ALT = "|".join(SECRET_KEYS)

_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(bearer\s+)[A-Za-z0-9_\-.]{8,}", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"\beyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+"), "***JWT***"),
    # "password": "..." inside JSON bodies
    (
        re.compile(rf"([\"']({_KEY_ALT})[\"']\s*:\s*[\"'])([^\"']*)([\"'])", re.IGNORECASE),
        rf"\1{REDACTED}\4",
    ),
    # password=... / token: ... in free text
    (
        re.compile(rf"\b(({_KEY_ALT})\s*[:=]\s*)(?!\*\*\*)([^\s,;}}\"']+)", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
    (
        re.compile(r"\b(postgresql|postgres|mysql|mariadb)(\+\w+)?://([^:/@\s]+):([^@\s]+)@"),
        rf"\1\2://\3:{REDACTED}@",
    ),
    (re.compile(r"\b(phone[\"']?\s*[:=]\s*[\"']?)\+?\d{7,15}", re.IGNORECASE), r"\1***"),
    (
        re.compile(r"\b(dob[\"']?\s*[:=]\s*[\"']?)\d{4}-\d{2}-\d{2}", re.IGNORECASE),
        r"\1****-**-**",
    ),
    # Keep the domain so delivery problems stay diagnosable
    (re.compile(r"\b[A-Za-z0-9._%+-]+@([A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,})\b"), r"***@\1"),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_mapping(data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``data`` with secret keys redacted and personal keys masked."""

    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        lowered = key.lower()
        if lowered in SECRET_KEYS:
            cleaned[key] = REDACTED
        elif lowered in PERSONAL_KEYS:
            cleaned[key] = "***"
        elif isinstance(value, Mapping):
            cleaned[key] = sanitize_mapping(value)
        elif isinstance(value, str):
            cleaned[key] = sanitize_message(value)
        else:
            cleaned[key] = value
    return cleaned


def sanitize_record(record: dict[str, Any]) -> bool:
    """loguru filter: rewrites the message in place and never drops a record."""

    record["message"] = sanitize_message(record["message"])
    return True
