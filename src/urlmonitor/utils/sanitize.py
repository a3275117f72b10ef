# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Diagnostic message clean-up.

Response bodies and error strings frequently carry JSON-style ``\\uXXXX`` escapes
(e.g. CJK error pages served as escaped JSON). They are decoded so stored
messages stay readable, then bounded in length.
"""

from __future__ import annotations

import re

MESSAGE_LIMIT = 1250

_ESCAPE_RE = re.compile(
    r"\\u(d[89ab][0-9a-f]{2})\\u(d[c-f][0-9a-f]{2})|\\u([0-9a-f]{4})",
    re.IGNORECASE,
)


def _decode_escape(match: re.Match[str]) -> str:
    if match.group(1):
        high = int(match.group(1), 16)
        low = int(match.group(2), 16)
        return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
    code = int(match.group(3), 16)
    if 0xD800 <= code <= 0xDFFF:
        # unpaired surrogate
        return match.group(0)
    return chr(code)


def decode_unicode_escapes(text: str) -> str:
    """
    Replace each literal ``\\uXXXX`` (exactly four hex digits) with its character.

    Surrogate pairs are combined. Malformed escapes and unpaired surrogates are
    kept as literal text.
    """
    if not text or "\\u" not in text:
        return text or ""
    return _ESCAPE_RE.sub(_decode_escape, text)


def sanitize_message(text: object, limit: int = MESSAGE_LIMIT) -> str:
    """Decode escapes, then keep at most ``limit`` characters of the prefix."""
    decoded = decode_unicode_escapes("" if text is None else str(text))
    if len(decoded) > limit:
        return decoded[:limit]
    return decoded


__all__ = ["MESSAGE_LIMIT", "decode_unicode_escapes", "sanitize_message"]
