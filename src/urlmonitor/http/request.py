# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Turn a ProbeConfig into an outbound HttpRequest."""

from __future__ import annotations

import re

import httpx

from ..config import ProbeConfig
from ..errors import ConfigError
from .headers import has_header
from .models import HttpRequest

DEFAULT_CONTENT_TYPE = "application/x-www-form-urlencoded"
SUPPORTED_SCHEMES = ("http", "https")

# RFC 9110 token characters.
_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def validate_method(method: str | None) -> str:
    """Return the upper-cased method or raise ConfigError."""
    value = (method or "").strip()
    if not value or not _METHOD_RE.match(value):
        raise ConfigError(f"invalid HTTP method: {method!r}")
    return value.upper()


def validate_address(address: str | None) -> httpx.URL:
    """Parse an absolute http(s) URL or raise ConfigError."""
    raw = (address or "").strip()
    if not raw:
        raise ConfigError("address is empty")
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise ConfigError(f"unparseable address {raw!r}: {exc}") from exc
    if url.scheme not in SUPPORTED_SCHEMES:
        raise ConfigError("Only http and https are supported")
    if not url.host:
        raise ConfigError(f"address {raw!r} has no host")
    return url


def _append_query(address: str, query: str) -> str:
    separator = "&" if "?" in address else "?"
    return f"{address}{separator}{query}"


def build_request(config: ProbeConfig) -> HttpRequest:
    """
    Build the single request a probe run sends.

    A GET never carries a body; a configured body is moved to the query string.
    A ``Host`` header in any casing becomes the virtual host override rather than
    an ordinary header; the exact ``Host`` spelling wins over other casings.
    """
    method = validate_method(config.method)
    address = config.address
    body: str | None = None
    if config.body:
        if method == "GET":
            address = _append_query(address, config.body)
        else:
            body = config.body
    url = validate_address(address)

    headers: dict[str, str] = {}
    host: str | None = None
    for key, value in config.headers.items():
        if key.lower() == "host":
            if key == "Host" or host is None:
                host = value
            continue
        headers[key] = value
    if not has_header(headers, "content-type"):
        headers["Content-Type"] = DEFAULT_CONTENT_TYPE

    return HttpRequest(url=str(url), method=method, headers=headers, body=body, host=host)


__all__ = ["DEFAULT_CONTENT_TYPE", "build_request", "validate_address", "validate_method"]
