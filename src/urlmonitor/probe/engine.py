# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe executor: one timed request, then content/status/latency classification."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import ProbeConfig
from ..errors import ErrorCategory, categorize_exception
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse, TransportOutcome
from ..http.request import build_request
from ..models.probe import ProbeFailure, ProbeOutcome, ProbeResult, ProbeSuccess
from ..utils.sanitize import sanitize_message
from .classify import match_content, match_latency, match_status

logger = logging.getLogger(__name__)


class ProbeEngine:
    """
    Runs probes through an injected HttpClient.

    The engine holds no per-run state, so one instance may serve any number of
    sequential or concurrent runs as long as the client allows it.
    """

    def __init__(self, http_client: HttpClient, *, clock: Callable[[], float] = time.perf_counter):
        self.http_client = http_client
        self._clock = clock

    def run(self, config: ProbeConfig, request: HttpRequest | None = None) -> ProbeResult:
        """Execute one probe and collapse its outcome into a ProbeResult."""
        return self.execute(config, request).to_result()

    def execute(self, config: ProbeConfig, request: HttpRequest | None = None) -> ProbeOutcome:
        if request is None:
            request = build_request(config)

        logger.debug("Probing %s %s", request.method, request.url)
        start = self._clock()
        response = self.http_client.request(request)
        elapsed = max(0.0, self._clock() - start)

        if response.outcome is TransportOutcome.TRANSPORT_ERROR:
            return self._failed(request, response, elapsed)

        if response.outcome is TransportOutcome.REDIRECT_BLOCKED:
            logger.debug(
                "Redirect from %s blocked (status %s, location %s)",
                request.url,
                response.status_code,
                response.meta.get("location"),
            )
        return self._classify(config, response, elapsed)

    def _failed(self, request: HttpRequest, response: HttpResponse, elapsed: float) -> ProbeFailure:
        kind = categorize_exception(response.error) if response.error is not None else ErrorCategory.UNKNOWN_ERROR
        raw = response.error_message or "request failed"
        message = sanitize_message(f"{request.method} {request.url}: {raw}")
        logger.warning("Probe of %s failed after %.3fs (%s): %s", request.url, elapsed, kind.value, raw)
        return ProbeFailure(response_time=elapsed, kind=kind, message=message)

    def _classify(self, config: ProbeConfig, response: HttpResponse, elapsed: float) -> ProbeSuccess:
        data_match, message = match_content(config.require_str, response.text)
        code_match = match_status(config.require_code, response.status_code)
        time_match = match_latency(elapsed, config.failed_timeout)

        if not (data_match and code_match and time_match):
            logger.info(
                "Probe of %s: status=%s data_match=%s code_match=%s time_match=%s elapsed=%.3fs",
                response.url,
                response.status_code,
                data_match,
                code_match,
                time_match,
                elapsed,
            )
        return ProbeSuccess(
            response_time=elapsed,
            http_code=response.status_code,
            data_match=data_match,
            code_match=code_match,
            time_match=time_match,
            message=message,
        )


__all__ = ["ProbeEngine"]
