# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx.Client factory: timeouts, TLS material and redirect policy."""

from __future__ import annotations

import logging
import ssl

import httpx

from ..config import HttpSettings, ProbeConfig, load_http_settings
from ..errors import ConfigError, RedirectBlocked

logger = logging.getLogger(__name__)


def build_ssl_context(
    *,
    ca: str = "",
    cert: str = "",
    key: str = "",
    insecure_skip_verify: bool = False,
) -> ssl.SSLContext | bool:
    """
    Build the TLS verification setting for httpx.

    Returns ``True`` (httpx defaults) when no material is configured, otherwise an
    SSLContext loaded with the CA bundle and client certificate.
    """
    if not (ca or cert or key or insecure_skip_verify):
        return True
    if key and not cert:
        raise ConfigError("ssl_key requires ssl_cert")
    try:
        context = ssl.create_default_context(cafile=ca or None)
        if cert:
            context.load_cert_chain(certfile=cert, keyfile=key or None)
    except (OSError, ssl.SSLError, ValueError) as exc:
        raise ConfigError(f"could not load TLS material: {exc}") from exc
    if insecure_skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def block_redirects(response: httpx.Response) -> None:
    """Response hook that turns any redirect into the RedirectBlocked signal."""
    if response.has_redirect_location:
        raise RedirectBlocked(
            response.status_code,
            response.headers.get("Location"),
            dict(response.headers),
        )


def create_http_client(
    config: ProbeConfig,
    settings: HttpSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Build a client for one probe configuration."""
    settings = settings or load_http_settings()
    verify = build_ssl_context(
        ca=config.ssl_ca,
        cert=config.ssl_cert,
        key=config.ssl_key,
        insecure_skip_verify=config.insecure_skip_verify,
    )
    event_hooks: dict[str, list] = {"request": [], "response": []}
    if not config.follow_redirects:
        event_hooks["response"].append(block_redirects)

    timeout = config.timeout_seconds(settings.default_timeout)
    logger.debug(
        "Creating client timeout=%.1fs follow_redirects=%s custom_tls=%s",
        timeout,
        config.follow_redirects,
        verify is not True,
    )
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        verify=verify,
        follow_redirects=config.follow_redirects,
        max_redirects=settings.max_redirects,
        event_hooks=event_hooks,
        transport=transport,
        trust_env=False,
    )


__all__ = ["block_redirects", "build_ssl_context", "create_http_client"]
