# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe outcome models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from ..errors import ErrorCategory

NO_RESPONSE = 0


@dataclass(frozen=True)
class ProbeResult:
    """The single record a probe run hands back to its caller."""

    response_time: float
    http_code: int = NO_RESPONSE
    data_match: bool = False
    code_match: bool = False
    time_match: bool = False
    message: str | None = None
    error_kind: ErrorCategory = ErrorCategory.NONE

    @property
    def failed(self) -> bool:
        """True when no response was obtained."""
        return self.error_kind is not ErrorCategory.NONE

    @property
    def healthy(self) -> bool:
        return not self.failed and self.data_match and self.code_match and self.time_match

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["error_kind"] = self.error_kind.value
        return data


@dataclass(frozen=True)
class ProbeSuccess:
    """A response (or an intercepted redirect) was obtained and classified."""

    response_time: float
    http_code: int
    data_match: bool
    code_match: bool
    time_match: bool
    message: str | None = None

    def to_result(self) -> ProbeResult:
        return ProbeResult(
            response_time=self.response_time,
            http_code=self.http_code,
            data_match=self.data_match,
            code_match=self.code_match,
            time_match=self.time_match,
            message=self.message,
        )


@dataclass(frozen=True)
class ProbeFailure:
    """No response was obtained; every match is forced to "no match"."""

    response_time: float
    kind: ErrorCategory
    message: str

    def to_result(self) -> ProbeResult:
        return ProbeResult(
            response_time=self.response_time,
            http_code=NO_RESPONSE,
            data_match=False,
            code_match=False,
            time_match=False,
            message=self.message,
            error_kind=self.kind,
        )


ProbeOutcome = ProbeSuccess | ProbeFailure
