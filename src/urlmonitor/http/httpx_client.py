# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import time

import httpx

from ..config import HttpSettings, ProbeConfig, load_http_settings
from ..errors import RedirectBlocked
from .client import HttpClient
from .headers import has_header
from .models import HttpRequest, HttpResponse, TransportOutcome
from .transport import create_http_client


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper; never raises for transport failures."""

    clock = time.monotonic

    def __init__(
        self,
        config: ProbeConfig,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
    ):
        self.config = config
        self.settings = settings or load_http_settings()
        self._client = client or create_http_client(config, self.settings)

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = request.wire_headers()
        if not has_header(headers, "User-Agent"):
            headers["User-Agent"] = self.settings.user_agent

        timeout = self.config.timeout_seconds(self.settings.default_timeout)
        deadline = self.clock() + timeout
        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body or None,
            ) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    # httpx only bounds each read; the whole exchange shares one deadline.
                    if self.clock() > deadline:
                        raise httpx.ReadTimeout(
                            f"overall timeout of {timeout:.1f}s exceeded while reading body",
                            request=resp.request,
                        )
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")

            return HttpResponse(
                outcome=TransportOutcome.COMPLETED,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                text=text,
                url=str(resp.url),
                meta={
                    "body_truncated": truncated,
                    "body_bytes_read": len(content),
                    "body_bytes_limit": max_body_bytes,
                },
            )
        except RedirectBlocked as blocked:
            return HttpResponse(
                outcome=TransportOutcome.REDIRECT_BLOCKED,
                status_code=blocked.status_code,
                headers=blocked.headers,
                url=request.url,
                error=blocked,
                meta={"location": blocked.location},
            )
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                outcome=TransportOutcome.TRANSPORT_ERROR,
                url=request.url,
                error=exc,
            )

    def close(self) -> None:
        self._client.close()
