# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
urlmonitor package entrypoint.

A single-target HTTP/HTTPS health-check probe: one request per run, timed and
classified against content, status and latency expectations. HTTP behavior is
abstracted behind an injectable client interface, and results are modeled with
typed dataclasses so callers always receive a structured record.
"""

from .config import HttpSettings, ProbeConfig, load_config_file, load_http_settings
from .errors import ConfigError, ErrorCategory, RedirectBlocked
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    TransportOutcome,
    build_request,
    create_default_http_client,
    create_http_client,
)
from .log import setup_logging
from .models import Metric, ProbeFailure, ProbeResult, ProbeSuccess
from .probe import ProbeEngine, build_metric
from .runtime import UrlMonitor, run_probe
from .utils import sanitize_message
from .version import __version__

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "Metric",
    "ProbeConfig",
    "ProbeEngine",
    "ProbeFailure",
    "ProbeResult",
    "ProbeSuccess",
    "RedirectBlocked",
    "TransportOutcome",
    "UrlMonitor",
    "build_metric",
    "build_request",
    "create_default_http_client",
    "create_http_client",
    "load_config_file",
    "load_http_settings",
    "run_probe",
    "sanitize_message",
    "setup_logging",
    "__version__",
]
