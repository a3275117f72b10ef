# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header lookup utilities.

HTTP header field names are case-insensitive (RFC 9110), while probe
configurations carry headers as plain dicts in whatever casing the user wrote.
"""

from __future__ import annotations

from collections.abc import Mapping


def has_header(headers: Mapping[str, str] | None, name: str) -> bool:
    """Return True when a header is present, ignoring case."""
    if not headers or not name:
        return False
    lower = name.lower()
    return any(str(key).lower() == lower for key in headers)


__all__ = ["has_header"]
