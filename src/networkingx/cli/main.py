# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""NetworkingX CLI: issue one endpoint request and print the decoded result."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import ApiDataNetworkConfig, HttpSettings, load_http_settings
from ..decoding import JSONResponseDecoder, RawDataResponseDecoder, XMLResponseDecoder
from ..encoding import JSONEncoding, MultipartEncoding, URLEncoding, XMLEncoding
from ..endpoint import Endpoint
from ..errors import NetworkError
from ..http.models import HTTPMethod
from ..log import setup_logging
from ..runtime import NetworkingX

CLI_TEXT_TRUNCATION_BYTES = 4096

_ENCODINGS = {
    "url": URLEncoding,
    "json": JSONEncoding,
    "xml": XMLEncoding,
    "multipart": MultipartEncoding,
}
_DECODERS = {
    "json": (JSONResponseDecoder, Any),
    "xml": (XMLResponseDecoder, Any),
    "raw": (RawDataResponseDecoder, bytes),
}


def _pair(separator: str):  # noqa: ANN202
    def parse(value: str) -> tuple[str, str]:
        key, sep, rest = value.partition(separator)
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"expected KEY{separator}VALUE, got {value!r}")
        return key.strip(), rest.strip() if separator == ":" else rest

    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send one REST request through the NetworkingX pipeline")
    parser.add_argument("method", type=str.upper, choices=[m.value for m in HTTPMethod], help="HTTP method")
    parser.add_argument("url", help="Absolute URL of the endpoint")
    parser.add_argument("-H", "--header", dest="headers", action="append", type=_pair(":"), default=[], help="Header as 'Name: value'")
    parser.add_argument("-q", "--query", dest="query", action="append", type=_pair("="), default=[], help="Query parameter as key=value")
    parser.add_argument("-d", "--data", dest="data", action="append", type=_pair("="), default=[], help="Body parameter as key=value")
    parser.add_argument("--encoding", choices=sorted(_ENCODINGS), default="json", help="Body encoding (default: json)")
    parser.add_argument("--decoder", choices=sorted(_DECODERS), default="json", help="Response decoder (default: json)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG shows requests and responses)")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    return parser


def build_endpoint(args: argparse.Namespace) -> Endpoint[Any]:
    decoder_cls, response_type = _DECODERS[args.decoder]
    return Endpoint(
        path=args.url,
        is_full_path=True,
        method=HTTPMethod(args.method),
        header_parameters=dict(args.headers),
        query_parameters=dict(args.query),
        body_parameters=dict(args.data),
        body_encoding=_ENCODINGS[args.encoding](),
        response_decoder=decoder_cls(),
        response_type=response_type,
    )


def _print_value(value: Any) -> None:
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value[:CLI_TEXT_TRUNCATION_BYTES]).decode("utf-8", errors="replace")
        sys.stdout.write(text)
        if len(value) > CLI_TEXT_TRUNCATION_BYTES:
            sys.stdout.write(f"\n... ({len(value) - CLI_TEXT_TRUNCATION_BYTES} more bytes)")
        sys.stdout.write("\n")
        return
    json.dump(value, sys.stdout, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def _print_error(error: BaseException) -> None:
    print(f"[NetworkingX] {type(error).__name__}: {error}", file=sys.stderr)
    cause = getattr(error, "cause", None)
    if isinstance(cause, NetworkError) and cause.data:
        body = cause.data[:CLI_TEXT_TRUNCATION_BYTES].decode("utf-8", errors="replace")
        print(body, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.timeout is not None:
        settings.timeout = args.timeout

    endpoint = build_endpoint(args)
    config = ApiDataNetworkConfig(base_url=args.url)

    with NetworkingX(config, settings=settings) as client:
        result = client.fetch(endpoint)

    if not result.ok:
        _print_error(result.error)
        return 1
    _print_value(result.value)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
