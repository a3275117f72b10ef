# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe execution and classification."""

from .classify import (
    LATENCY_HYSTERESIS,
    apply_latency_hysteresis,
    match_content,
    match_latency,
    match_status,
    pattern_matches,
)
from .engine import ProbeEngine
from .metric import build_metric

__all__ = [
    "LATENCY_HYSTERESIS",
    "ProbeEngine",
    "apply_latency_hysteresis",
    "build_metric",
    "match_content",
    "match_latency",
    "match_status",
    "pattern_matches",
]
