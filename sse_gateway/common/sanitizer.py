"""
Data Sanitization Module

Masks credentials in outbound request headers so logs never contain them in plain text.
"""

from collections.abc import Mapping
from typing import Any

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key", "api-key", "cookie"}


def sanitize_authorization(value: str) -> str:
    """
    Mask a credential value, keeping a prefix and some characters for identification.

    Examples:
        >>> sanitize_authorization("Bearer sk-1234567890abcdef")
        'Bearer sk-1***...***ef'
        >>> sanitize_authorization("short")
        '***'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.lower().startswith("bearer "):
        prefix = "Bearer "
        token = value[7:]

    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Return a copy of the headers with credential fields masked.
    """
    if not headers:
        return {}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and isinstance(value, str):
            sanitized[key] = sanitize_authorization(value)
        else:
            sanitized[key] = value
    return sanitized
