# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .client import HttpClient, create_default_http_client
from .headers import has_header
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, TransportOutcome
from .request import DEFAULT_CONTENT_TYPE, build_request, validate_address, validate_method
from .transport import block_redirects, build_ssl_context, create_http_client

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "TransportOutcome",
    "block_redirects",
    "build_request",
    "build_ssl_context",
    "create_default_http_client",
    "create_http_client",
    "has_header",
    "validate_address",
    "validate_method",
]
