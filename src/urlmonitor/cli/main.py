# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""urlmonitor CLI."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any

from ..config import SAMPLE_CONFIG, ProbeConfig, load_config_file, parse_duration
from ..errors import ConfigError, error_category_to_reason
from ..log import setup_logging
from ..models import Metric
from ..runtime import UrlMonitor

EXIT_HEALTHY = 0
EXIT_UNHEALTHY = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Single-target HTTP/HTTPS health-check probe")
    parser.add_argument("address", nargs="?", help="Target URL (overrides the config file address)")
    parser.add_argument("-c", "--config", help="TOML file with one url_monitor probe configuration")
    parser.add_argument("-X", "--method", help="HTTP method (default GET)")
    parser.add_argument("-d", "--body", help="Request body; appended to the query string for GET")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Request header, repeatable. 'Host: name' overrides the virtual host",
    )
    parser.add_argument("--timeout", help="Response timeout, seconds or duration such as 5s/500ms")
    parser.add_argument("--follow-redirects", action="store_true", default=None, help="Follow redirects")
    parser.add_argument("--require-str", help="Expected body content (regex, or substring if it does not compile)")
    parser.add_argument("--require-code", help="Expected status code (regex, or substring if it does not compile)")
    parser.add_argument("--failed-timeout", type=float, help="Latency threshold in seconds")
    parser.add_argument("--ssl-ca", help="CA bundle path")
    parser.add_argument("--ssl-cert", help="Client certificate path")
    parser.add_argument("--ssl-key", help="Client key path")
    parser.add_argument(
        "--insecure",
        action="store_true",
        default=None,
        help="Skip TLS chain and hostname verification",
    )
    parser.add_argument("--tag", action="append", default=[], metavar="KEY=VALUE", help="Identity label, repeatable")
    parser.add_argument("--json", action="store_true", help="Output the metric as JSON")
    parser.add_argument("--log-level", help="Logging level (default from URLMONITOR_LOG_LEVEL)")
    parser.add_argument("--sample-config", action="store_true", help="Print a sample TOML configuration and exit")
    return parser


def _split_pairs(values: list[str], separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition(separator)
        if not sep or not key.strip():
            raise ConfigError(f"invalid {label} {raw!r}, expected KEY{separator}VALUE")
        pairs[key.strip()] = value.strip()
    return pairs


def config_from_args(args: argparse.Namespace) -> ProbeConfig:
    """Merge command-line overrides over an optional config file."""
    config = load_config_file(args.config) if args.config else ProbeConfig()
    overrides: dict[str, Any] = {}
    if args.address:
        overrides["address"] = args.address
    if args.method:
        overrides["method"] = args.method
    if args.body is not None:
        overrides["body"] = args.body
    if args.header:
        overrides["headers"] = {**config.headers, **_split_pairs(args.header, ":", "header")}
    if args.timeout is not None:
        overrides["response_timeout"] = parse_duration(args.timeout)
    if args.follow_redirects is not None:
        overrides["follow_redirects"] = args.follow_redirects
    if args.require_str is not None:
        overrides["require_str"] = args.require_str
    if args.require_code is not None:
        overrides["require_code"] = args.require_code
    if args.failed_timeout is not None:
        overrides["failed_timeout"] = args.failed_timeout
    if args.ssl_ca:
        overrides["ssl_ca"] = args.ssl_ca
    if args.ssl_cert:
        overrides["ssl_cert"] = args.ssl_cert
    if args.ssl_key:
        overrides["ssl_key"] = args.ssl_key
    if args.insecure is not None:
        overrides["insecure_skip_verify"] = args.insecure
    if args.tag:
        overrides["tags"] = {**config.tags, **_split_pairs(args.tag, "=", "tag")}
    return dataclasses.replace(config, **overrides) if overrides else config


def _print_json(metric: Metric) -> None:
    json.dump(metric.to_dict(), sys.stdout, indent=2, sort_keys=True, ensure_ascii=False)
    sys.stdout.write("\n")


def _flag(value: Any) -> str:
    return "yes" if value else "no"


def _pretty_print(metric: Metric) -> None:
    fields = metric.fields
    tags = metric.tags
    print(f"[urlmonitor] {tags.get('method')} {tags.get('url')}")
    print(f"Status: {fields.get('http_code')}  Response time: {fields.get('response_time', 0.0):.3f}s")
    print(
        f"Content match: {_flag(fields.get('data_match'))}  "
        f"Status match: {_flag(fields.get('code_match'))}  "
        f"Latency match: {_flag(fields.get('time_match'))}"
    )
    message = fields.get("msg")
    if message:
        print(f"Message: {message}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.sample_config:
        sys.stdout.write(SAMPLE_CONFIG)
        return EXIT_HEALTHY

    try:
        config = config_from_args(args)
        with UrlMonitor(config) as monitor:
            result = monitor.probe()
            metric = monitor.metric_for(result)
    except ConfigError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.json:
        _print_json(metric)
    else:
        _pretty_print(metric)
        if result.failed:
            print(f"Reason: {error_category_to_reason(result.error_kind)}")

    return EXIT_HEALTHY if result.healthy else EXIT_UNHEALTHY


if __name__ == "__main__":
    raise SystemExit(main())
