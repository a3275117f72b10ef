# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for urlmonitor."""

from ..http.models import Headers, HttpRequest, HttpResponse, TransportOutcome
from .metric import MEASUREMENT, Metric
from .probe import NO_RESPONSE, ProbeFailure, ProbeOutcome, ProbeResult, ProbeSuccess

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "MEASUREMENT",
    "Metric",
    "NO_RESPONSE",
    "ProbeFailure",
    "ProbeOutcome",
    "ProbeResult",
    "ProbeSuccess",
    "TransportOutcome",
]
