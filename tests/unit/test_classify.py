# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from urlmonitor.probe.classify import (
    LATENCY_HYSTERESIS,
    apply_latency_hysteresis,
    match_content,
    match_latency,
    match_status,
    pattern_matches,
)


def test_pattern_matches_uses_regex_search():
    assert pattern_matches(r"stat\w+", "service status: up") is True
    assert pattern_matches(r"^up$", "service status: up") is False


def test_empty_regex_match_is_not_a_match():
    assert pattern_matches("x*", "abc") is False
    assert pattern_matches("^", "abc") is False
    assert pattern_matches("x*", "axxb") is False
    assert pattern_matches("x+", "axxb") is True
    assert match_content("x*", "abc") == (False, "abc")
    assert match_status("9*", 200) is False


def test_pattern_that_fails_to_compile_falls_back_to_substring():
    assert pattern_matches("price[", "the price[0] is") is True
    assert pattern_matches("price[", "the price is") is False
    assert pattern_matches("(", "f(x)") is True


@pytest.mark.parametrize("pattern", [None, ""])
def test_no_patterns_always_match(pattern):
    assert match_content(pattern, "") == (True, None)
    assert match_content(pattern, "anything at all") == (True, None)
    assert match_status(pattern, 0) is True
    assert match_status(pattern, 503) is True


def test_content_mismatch_stores_sanitized_body():
    matched, message = match_content("healthy", "{\"error\": \"\\u670d\\u52a1\\u4e0d\\u53ef\\u7528\"}")
    assert matched is False
    assert message == '{"error": "服务不可用"}'


def test_content_mismatch_message_is_bounded():
    matched, message = match_content("healthy", "x" * 5000)
    assert matched is False
    assert len(message) == 1250


def test_status_pattern_regex_and_substring():
    assert match_status(r"20\d", 204) is True
    assert match_status(r"20\d", 302) is False
    assert match_status(r"^20\d$", 200) is True
    assert match_status("20[", 200) is False
    assert match_status("30", 302) is True


def test_latency_boundary_is_inclusive():
    assert match_latency(0.5, 0.5) is True
    assert match_latency(0.2, 0.5) is True
    assert match_latency(0.51, 0.5) is False


def test_latency_hysteresis_multiplier():
    assert LATENCY_HYSTERESIS == 0.7
    threshold = 1.0
    assert apply_latency_hysteresis(False, threshold * 0.69, threshold) is True
    assert apply_latency_hysteresis(False, threshold * 0.71, threshold) is False


def test_latency_hysteresis_never_flips_a_match():
    assert apply_latency_hysteresis(True, 5.0, 1.0) is True
    assert apply_latency_hysteresis(True, 0.9, 1.0) is True
