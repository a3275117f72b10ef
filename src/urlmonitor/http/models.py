# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the probe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Headers = dict[str, str]


class TransportOutcome(str, Enum):
    """How a single request/response round trip ended."""

    COMPLETED = "COMPLETED"
    REDIRECT_BLOCKED = "REDIRECT_BLOCKED"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: str | bytes | None = None
    host: str | None = None

    def wire_headers(self) -> Headers:
        """Headers as sent, with the virtual host override applied."""
        headers = dict(self.headers)
        if self.host:
            headers["Host"] = self.host
        return headers


@dataclass
class HttpResponse:
    """Normalized HTTP response with the minimal metadata the classifier needs."""

    outcome: TransportOutcome
    status_code: int = 0
    headers: Headers = field(default_factory=dict)
    text: str = ""
    url: str | None = None
    error: BaseException | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when a response (possibly a blocked redirect) was obtained."""
        return self.outcome is not TransportOutcome.TRANSPORT_ERROR

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return str(self.error) or type(self.error).__name__

    @property
    def error_type(self) -> str | None:
        return type(self.error).__name__ if self.error is not None else None
