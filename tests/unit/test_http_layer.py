# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import ssl

import httpx
import pytest

from urlmonitor.config import HttpSettings, ProbeConfig
from urlmonitor.errors import ConfigError, RedirectBlocked
from urlmonitor.http.client import create_default_http_client
from urlmonitor.http.httpx_client import HttpxClient
from urlmonitor.http.models import HttpRequest, HttpResponse, TransportOutcome
from urlmonitor.http.request import build_request
from urlmonitor.http.transport import block_redirects, build_ssl_context, create_http_client


def make_client(config: ProbeConfig, handler, settings: HttpSettings | None = None) -> HttpxClient:
    settings = settings or HttpSettings(user_agent="UA/1.0")
    transport = httpx.MockTransport(handler)
    return HttpxClient(config, settings, client=create_http_client(config, settings, transport=transport))


class RecordingHandler:
    def __init__(self, response: httpx.Response | None = None):
        self.requests: list[httpx.Request] = []
        self._response = response or httpx.Response(200, text="ok")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response


def test_completed_request_carries_status_and_body():
    config = ProbeConfig(address="http://svc.test/health")
    handler = RecordingHandler(httpx.Response(201, text="created"))
    client = make_client(config, handler)

    resp = client.request(build_request(config))

    assert resp.outcome is TransportOutcome.COMPLETED
    assert resp.ok is True
    assert resp.status_code == 201
    assert resp.text == "created"
    assert resp.meta["body_truncated"] is False
    assert handler.requests[0].headers["user-agent"] == "UA/1.0"


def test_get_body_is_never_transmitted():
    config = ProbeConfig(address="http://svc.test/search", body="q=1&x=2")
    handler = RecordingHandler()
    make_client(config, handler).request(build_request(config))

    sent = handler.requests[0]
    assert sent.method == "GET"
    assert sent.content == b""
    assert sent.url.params["q"] == "1"
    assert sent.url.params["x"] == "2"


def test_non_get_body_is_transmitted_unmodified():
    payload = "{'fake':'data'}"
    config = ProbeConfig(address="http://svc.test/api", method="POST", body=payload)
    handler = RecordingHandler()
    make_client(config, handler).request(build_request(config))

    sent = handler.requests[0]
    assert sent.content == payload.encode("utf-8")
    assert sent.headers["content-type"] == "application/x-www-form-urlencoded"


def test_host_header_overrides_virtual_host_on_the_wire():
    config = ProbeConfig(address="http://10.0.0.5/health", headers={"Host": "vhost.test", "X-Trace": "1"})
    handler = RecordingHandler()
    make_client(config, handler).request(build_request(config))

    sent = handler.requests[0]
    assert sent.headers["host"] == "vhost.test"
    assert sent.url.host == "10.0.0.5"
    assert sent.headers["x-trace"] == "1"


def test_host_header_casing_sends_a_single_host_on_the_wire():
    config = ProbeConfig(address="http://10.0.0.5/health", headers={"host": "vhost.test"})
    handler = RecordingHandler()
    make_client(config, handler).request(build_request(config))

    sent = handler.requests[0]
    assert sent.headers.get_list("host") == ["vhost.test"]
    assert sent.url.host == "10.0.0.5"


def test_configured_user_agent_is_not_replaced():
    config = ProbeConfig(address="http://svc.test/", headers={"user-agent": "probe/9"})
    handler = RecordingHandler()
    make_client(config, handler).request(build_request(config))
    assert handler.requests[0].headers.get_list("user-agent") == ["probe/9"]


def test_redirect_is_blocked_when_following_disabled():
    config = ProbeConfig(address="http://svc.test/old")

    def handler(request):
        return httpx.Response(302, headers={"Location": "http://svc.test/new"}, text="moved")

    resp = make_client(config, handler).request(build_request(config))

    assert resp.outcome is TransportOutcome.REDIRECT_BLOCKED
    assert resp.ok is True
    assert resp.status_code == 302
    assert resp.meta["location"] == "http://svc.test/new"
    assert isinstance(resp.error, RedirectBlocked)


def test_redirect_is_followed_when_enabled():
    config = ProbeConfig(address="http://svc.test/old", follow_redirects=True)
    seen = []

    def handler(request):
        seen.append(request.url.path)
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "/new"})
        return httpx.Response(200, text="landed")

    resp = make_client(config, handler).request(build_request(config))

    assert resp.outcome is TransportOutcome.COMPLETED
    assert resp.status_code == 200
    assert resp.text == "landed"
    assert seen == ["/old", "/new"]


def test_redirect_loop_is_a_transport_error_when_following():
    config = ProbeConfig(address="http://svc.test/loop", follow_redirects=True)

    def handler(request):
        return httpx.Response(302, headers={"Location": "/loop"})

    resp = make_client(config, handler, HttpSettings(max_redirects=3)).request(build_request(config))

    assert resp.outcome is TransportOutcome.TRANSPORT_ERROR
    assert isinstance(resp.error, httpx.TooManyRedirects)
    assert resp.status_code == 0


def test_connection_failure_is_folded_into_response():
    config = ProbeConfig(address="http://example.test")

    def handler(request):
        raise httpx.ConnectError("Name or service not known", request=request)

    resp = make_client(config, handler).request(build_request(config))

    assert resp.outcome is TransportOutcome.TRANSPORT_ERROR
    assert resp.ok is False
    assert resp.error_message == "Name or service not known"
    assert resp.error_type == "ConnectError"


def test_body_is_capped_at_max_body_bytes():
    config = ProbeConfig(address="http://svc.test/")
    handler = RecordingHandler(httpx.Response(200, content=b"abcdefgh"))
    resp = make_client(config, handler, HttpSettings(max_body_bytes=4)).request(build_request(config))

    assert resp.text == "abcd"
    assert resp.meta["body_truncated"] is True
    assert resp.meta["body_bytes_read"] == 4


def test_overall_deadline_applies_while_reading_body():
    config = ProbeConfig(address="http://svc.test/", response_timeout=2)
    handler = RecordingHandler(httpx.Response(200, content=b"slow body"))
    client = make_client(config, handler)
    ticks = iter([0.0, 10.0, 10.0, 10.0])
    client.clock = lambda: next(ticks)

    resp = client.request(build_request(config))

    assert resp.outcome is TransportOutcome.TRANSPORT_ERROR
    assert isinstance(resp.error, httpx.ReadTimeout)


def test_http_response_error_helpers():
    resp = HttpResponse(outcome=TransportOutcome.TRANSPORT_ERROR, error=TimeoutError())
    assert resp.error_message == "TimeoutError"
    assert HttpResponse(outcome=TransportOutcome.COMPLETED).error_message is None


def test_wire_headers_without_host_override():
    request = HttpRequest(url="http://svc.test/", headers={"X": "1"})
    assert request.wire_headers() == {"X": "1"}


def test_unset_timeout_falls_back_to_settings_default():
    client = create_http_client(ProbeConfig(), HttpSettings(default_timeout=30.0))
    short = create_http_client(ProbeConfig(response_timeout=0.5), HttpSettings(default_timeout=30.0))
    explicit = create_http_client(ProbeConfig(response_timeout=3), HttpSettings(default_timeout=30.0))
    try:
        assert client.timeout.read == 30.0
        assert client.timeout.connect == 30.0
        assert short.timeout.read == 30.0
        assert explicit.timeout.read == 3.0
    finally:
        client.close()
        short.close()
        explicit.close()


def test_timeout_env_setting_reaches_client(monkeypatch):
    monkeypatch.setenv("URLMONITOR_HTTP_TIMEOUT", "30")
    client = create_http_client(ProbeConfig())
    try:
        assert client.timeout.read == 30.0
    finally:
        client.close()


def test_overall_deadline_uses_settings_default():
    config = ProbeConfig(address="http://svc.test/")
    ticks = iter([0.0, 20.0, 20.0, 20.0])

    def handler(request):
        return httpx.Response(200, content=b"slow body")

    client = make_client(config, handler, HttpSettings(default_timeout=30.0))
    client.clock = lambda: next(ticks, 20.0)

    resp = client.request(build_request(config))

    assert resp.outcome is TransportOutcome.COMPLETED
    assert resp.text == "slow body"


def test_client_timeouts_follow_response_timeout():
    fast = create_http_client(ProbeConfig(response_timeout=0.3), HttpSettings())
    slow = create_http_client(ProbeConfig(response_timeout=12), HttpSettings())
    try:
        assert fast.timeout.read == 5.0
        assert fast.timeout.connect == 5.0
        assert slow.timeout.read == 12.0
        assert slow.follow_redirects is False
    finally:
        fast.close()
        slow.close()


def test_create_default_http_client_returns_httpx_client():
    client = create_default_http_client(ProbeConfig(), HttpSettings())
    try:
        assert isinstance(client, HttpxClient)
    finally:
        client.close()


def test_block_redirects_ignores_plain_responses():
    request = httpx.Request("GET", "http://svc.test/")
    block_redirects(httpx.Response(200, request=request))
    block_redirects(httpx.Response(304, request=request))
    with pytest.raises(RedirectBlocked) as excinfo:
        block_redirects(httpx.Response(307, headers={"Location": "/x"}, request=request))
    assert excinfo.value.status_code == 307
    assert excinfo.value.location == "/x"


def test_build_ssl_context_defaults_to_httpx_verification():
    assert build_ssl_context() is True


def test_build_ssl_context_skip_verify():
    context = build_ssl_context(insecure_skip_verify=True)
    assert isinstance(context, ssl.SSLContext)
    assert context.check_hostname is False
    assert context.verify_mode == ssl.CERT_NONE


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ca": "/nonexistent/ca.pem"},
        {"cert": "/nonexistent/cert.pem", "key": "/nonexistent/key.pem"},
        {"key": "/nonexistent/key.pem"},
    ],
)
def test_build_ssl_context_unreadable_material_is_config_error(kwargs):
    with pytest.raises(ConfigError):
        build_ssl_context(**kwargs)


def test_build_ssl_context_rejects_garbage_ca(tmp_path):
    bogus = tmp_path / "ca.pem"
    bogus.write_text("not a certificate")
    with pytest.raises(ConfigError):
        build_ssl_context(ca=str(bogus))


def test_create_http_client_surfaces_tls_config_error():
    with pytest.raises(ConfigError):
        create_http_client(ProbeConfig(ssl_ca="/nonexistent/ca.pem"), HttpSettings())
