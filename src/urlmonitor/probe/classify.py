# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Match predicates applied to a probe response."""

from __future__ import annotations

import re

from ..utils.sanitize import sanitize_message

# Business rule: a latency miss is forgiven when the response still came back
# faster than this share of the threshold. Keep the exact value.
LATENCY_HYSTERESIS = 0.7


def pattern_matches(pattern: str, text: str) -> bool:
    """
    Regex search, falling back to plain substring containment.

    Business rules: a pattern that does not compile is not an error; it is treated
    as a literal substring. An empty leftmost regex match counts as no match.
    """
    try:
        compiled = re.compile(pattern)
    except re.error:
        return pattern in text
    match = compiled.search(text)
    return match is not None and match.group(0) != ""


def match_content(pattern: str | None, body: str) -> tuple[bool, str | None]:
    """Return (matched, message); the sanitized body is the message on a miss."""
    if not pattern:
        return True, None
    if pattern_matches(pattern, body):
        return True, None
    return False, sanitize_message(body)


def match_status(pattern: str | None, status_code: int) -> bool:
    if not pattern:
        return True
    return pattern_matches(pattern, str(status_code))


def apply_latency_hysteresis(matched: bool, elapsed: float, threshold: float) -> bool:
    """Flip a miss back to a match below ``threshold * 0.7``; never flips a match."""
    if not matched and elapsed < threshold * LATENCY_HYSTERESIS:
        return True
    return matched


def match_latency(elapsed: float, threshold: float) -> bool:
    matched = elapsed <= threshold
    return apply_latency_hysteresis(matched, elapsed, threshold)


__all__ = [
    "LATENCY_HYSTERESIS",
    "apply_latency_hysteresis",
    "match_content",
    "match_latency",
    "match_status",
    "pattern_matches",
]
