# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade wiring request building, transport and classification."""

from __future__ import annotations

from contextlib import suppress

from .config import HttpSettings, ProbeConfig, load_http_settings
from .http.client import HttpClient, create_default_http_client
from .http.request import build_request
from .models import Metric, ProbeResult
from .probe.engine import ProbeEngine
from .probe.metric import build_metric


class UrlMonitor:
    """
    One probe configuration bound to its HTTP client.

    The configuration is validated (address, method, TLS material) on construction,
    so a ConfigError surfaces before any network activity. The client is reused
    across `probe()` calls; runs share no other state.
    """

    def __init__(
        self,
        config: ProbeConfig,
        http_client: HttpClient | None = None,
        settings: HttpSettings | None = None,
    ):
        self.config = config
        self.http_settings = settings or load_http_settings()
        self.request = build_request(config)
        self._owns_client = http_client is None
        self.http_client = http_client or create_default_http_client(config, self.http_settings)
        self.engine = ProbeEngine(self.http_client)

    def probe(self) -> ProbeResult:
        return self.engine.run(self.config, self.request)

    def metric_for(self, result: ProbeResult) -> Metric:
        return build_metric(self.config, result)

    def gather(self) -> Metric:
        """Run one probe and return it as a url_monitor metric."""
        return self.metric_for(self.probe())

    def close(self) -> None:
        if not self._owns_client:
            return
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> UrlMonitor:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


def run_probe(config: ProbeConfig, http_client: HttpClient | None = None) -> ProbeResult:
    """Run a single probe with a fresh client."""
    with UrlMonitor(config, http_client=http_client) as monitor:
        return monitor.probe()


__all__ = ["UrlMonitor", "run_probe"]
