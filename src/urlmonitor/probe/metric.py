# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shape a ProbeResult into the url_monitor metric consumed by metrics sinks."""

from __future__ import annotations

from typing import Any

from ..config import ProbeConfig
from ..models.metric import MEASUREMENT, Metric
from ..models.probe import ProbeResult


def format_threshold(value: float) -> str:
    """One significant digit, as the threshold has always been reported."""
    return f"{value:.1g}"


def build_fields(config: ProbeConfig, result: ProbeResult) -> dict[str, Any]:
    # Frequently edited settings travel as fields rather than tags.
    fields: dict[str, Any] = {
        "require_code": config.require_code,
        "require_str": config.require_str,
        "require_time": format_threshold(config.failed_timeout),
        "failed_threshold": str(config.failed_count),
        "data_match": int(result.data_match),
        "code_match": int(result.code_match),
        "time_match": int(result.time_match),
        "response_time": result.response_time,
        "http_code": result.http_code,
    }
    if result.message:
        fields["msg"] = result.message
    return fields


def build_tags(config: ProbeConfig) -> dict[str, str]:
    tags = {str(k): str(v) for k, v in config.tags.items()}
    tags.update(
        {
            "cmdbid": config.cmdbid,
            "app": config.app,
            "url": config.address,
            "method": config.method,
        }
    )
    return tags


def build_metric(config: ProbeConfig, result: ProbeResult) -> Metric:
    return Metric(name=MEASUREMENT, fields=build_fields(config, result), tags=build_tags(config))


__all__ = ["build_fields", "build_metric", "build_tags", "format_threshold"]
