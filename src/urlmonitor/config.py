# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for urlmonitor."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .version import __version__

DEFAULT_USER_AGENT = f"urlmonitor/{__version__}"
DEFAULT_ADDRESS = "http://localhost"
DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT = 5.0
MIN_TIMEOUT = 1.0

SAMPLE_CONFIG = """\
## Identity labels, attached to the output tags only
app = "monitor"
cmdbid = "1701"
## Server address (default http://localhost)
address = "http://example.com"
## Response timeout (default 5 seconds, values below 1s fall back to 5s)
response_timeout = "5s"
## HTTP request method (default GET)
method = "GET"
## Content pattern; a regular expression, or a plain substring when it does not compile.
## Single quotes avoid TOML escape processing.
require_str = 'example'
## Status pattern, matched against the decimal status code
require_code = '20\\d'
## Failure threshold forwarded to the output fields
failed_count = 3
## Latency threshold in seconds
failed_timeout = 0.5
## Whether to follow redirects from the server (default false)
follow_redirects = true
## Optional request body; appended to the query string for GET
# body = '''
# {'fake':'data'}
# '''

## Optional TLS config
# ssl_ca = "/etc/urlmonitor/ca.pem"
# ssl_cert = "/etc/urlmonitor/cert.pem"
# ssl_key = "/etc/urlmonitor/key.pem"
## Use TLS but skip chain & host verification
# insecure_skip_verify = false

## Free-form labels forwarded to the output tags
# [tags]
#   env = "prod"

## Request headers (all values must be strings). A header named Host overrides
## the virtual host. Tables run until the next table header, so keep this last.
# [headers]
#   Host = "example.com"
"""


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    default_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: int = 16 * 1024 * 1024
    max_redirects: int = 10

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("URLMONITOR_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        default_timeout = _float_env("URLMONITOR_HTTP_TIMEOUT", cls.default_timeout)
        if default_timeout < MIN_TIMEOUT:
            default_timeout = cls.default_timeout
        max_redirects = _int_env("URLMONITOR_HTTP_MAX_REDIRECTS", cls.max_redirects)
        if max_redirects < 0:
            max_redirects = cls.max_redirects
        return cls(
            default_timeout=default_timeout,
            user_agent=os.getenv("URLMONITOR_USER_AGENT", cls.user_agent),
            max_body_bytes=max_body_bytes,
            max_redirects=max_redirects,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


_DURATION_RE = re.compile(r"(?P<value>\d+(?:\.\d*)?|\.\d+)(?P<unit>ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> float | None:
    """
    Parse a timeout into seconds.

    Accepts plain numbers (seconds) and collector-style duration strings such as
    ``"5s"``, ``"500ms"`` or ``"1m30s"``. Empty values mean "unset".
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    pos = 0
    for match in _DURATION_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group("value")) * _DURATION_UNITS[match.group("unit")]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ConfigError(f"invalid duration: {value!r}")
    return total


def _str_field(data: Mapping[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{key} must be a string")
    return str(value)


def _float_field(data: Mapping[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number") from exc


def _int_field(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer") from exc


def _bool_field(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _table_field(data: Mapping[str, Any], key: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{key} must be a table of strings")
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass(frozen=True)
class ProbeConfig:
    """Everything one probe run needs; immutable for the duration of the run."""

    address: str = DEFAULT_ADDRESS
    method: str = DEFAULT_METHOD
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    response_timeout: float | None = None
    follow_redirects: bool = False
    require_str: str = ""
    require_code: str = ""
    failed_timeout: float = 0.0
    failed_count: int = 0
    ssl_ca: str = ""
    ssl_cert: str = ""
    ssl_key: str = ""
    insecure_skip_verify: bool = False
    app: str = ""
    cmdbid: str = ""
    tags: Mapping[str, str] = field(default_factory=dict)

    def timeout_seconds(self, default: float = DEFAULT_TIMEOUT) -> float:
        """Response timeout in seconds; unset or sub-second values fall back to ``default``."""
        if self.response_timeout is None or self.response_timeout < MIN_TIMEOUT:
            return float(default)
        return float(self.response_timeout)

    @property
    def has_tls_material(self) -> bool:
        return bool(self.ssl_ca or self.ssl_cert or self.ssl_key or self.insecure_skip_verify)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProbeConfig":
        """Build a config from recognized keys; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise ConfigError("probe configuration must be a table")
        return cls(
            address=_str_field(data, "address").strip() or DEFAULT_ADDRESS,
            method=_str_field(data, "method").strip() or DEFAULT_METHOD,
            body=_str_field(data, "body"),
            headers=_table_field(data, "headers"),
            response_timeout=parse_duration(data.get("response_timeout")),
            follow_redirects=_bool_field(data, "follow_redirects", False),
            require_str=_str_field(data, "require_str"),
            require_code=_str_field(data, "require_code"),
            failed_timeout=_float_field(data, "failed_timeout", 0.0),
            failed_count=_int_field(data, "failed_count", 0),
            ssl_ca=_str_field(data, "ssl_ca"),
            ssl_cert=_str_field(data, "ssl_cert"),
            ssl_key=_str_field(data, "ssl_key"),
            insecure_skip_verify=_bool_field(data, "insecure_skip_verify", False),
            app=_str_field(data, "app"),
            cmdbid=_str_field(data, "cmdbid"),
            tags=_table_field(data, "tags"),
        )


def _select_probe_table(document: Mapping[str, Any]) -> Mapping[str, Any]:
    candidates: Any = None
    inputs = document.get("inputs")
    if isinstance(inputs, Mapping) and "url_monitor" in inputs:
        candidates = inputs["url_monitor"]
    elif "url_monitor" in document:
        candidates = document["url_monitor"]

    if candidates is None:
        return document
    if isinstance(candidates, list):
        if len(candidates) != 1:
            raise ConfigError(f"expected exactly one url_monitor table, found {len(candidates)}")
        candidates = candidates[0]
    if not isinstance(candidates, Mapping):
        raise ConfigError("url_monitor must be a table")
    return candidates


def load_config_file(path: str | Path) -> ProbeConfig:
    """Load a single probe configuration from a TOML file."""
    try:
        with open(path, "rb") as handle:
            document = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    return ProbeConfig.from_mapping(_select_probe_table(document))


__all__ = [
    "DEFAULT_ADDRESS",
    "DEFAULT_METHOD",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "HttpSettings",
    "ProbeConfig",
    "SAMPLE_CONFIG",
    "load_config_file",
    "load_http_settings",
    "parse_duration",
]
