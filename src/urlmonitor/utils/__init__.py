# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Utility exports."""

from .sanitize import MESSAGE_LIMIT, decode_unicode_escapes, sanitize_message

__all__ = ["MESSAGE_LIMIT", "decode_unicode_escapes", "sanitize_message"]
