# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum

import httpx


class ConfigError(ValueError):
    """Malformed probe configuration; raised before any network activity."""


class RedirectBlocked(Exception):
    """
    Signal raised when redirects are disabled and the server answered with one.

    This is not a failure: the probe completed and no further hops were attempted.
    """

    def __init__(self, status_code: int, location: str | None = None, headers: dict[str, str] | None = None):
        self.status_code = status_code
        self.location = location
        self.headers = dict(headers or {})
        super().__init__(f"redirect to {location or '<unknown>'} blocked (status {status_code})")


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    TLS_ERROR = "TLS_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    REDIRECT_ERROR = "REDIRECT_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def _chain(exc: BaseException) -> list[BaseException]:
    seen: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and current not in seen:
        seen.append(current)
        current = current.__cause__ or current.__context__
    return seen


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map httpx/ssl/socket exceptions to ErrorCategory.

    httpx wraps low-level errors, so the cause chain is inspected for DNS and TLS
    failures before falling back to the httpx class hierarchy.
    """
    chain = _chain(exc)

    if any(isinstance(item, (socket.gaierror, socket.herror)) for item in chain):
        return ErrorCategory.DNS_ERROR

    if any(isinstance(item, (ssl.SSLError, ssl.CertificateError)) for item in chain):
        return ErrorCategory.TLS_ERROR

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.TooManyRedirects):
        return ErrorCategory.REDIRECT_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError, httpx.DecodingError)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Timed out waiting for response",
        ErrorCategory.TLS_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.REDIRECT_ERROR: "Redirect chain could not be completed",
        ErrorCategory.PROTOCOL_ERROR: "Malformed HTTP exchange",
        ErrorCategory.UNKNOWN_ERROR: "Request failed",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed")


__all__ = [
    "ConfigError",
    "ErrorCategory",
    "RedirectBlocked",
    "categorize_exception",
    "error_category_to_reason",
]
