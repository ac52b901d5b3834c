# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Body parameter encodings (URL-encoded/JSON/XML/multipart).

Each strategy is a pure function of ``(request, parameters)`` returning an updated request.
Failures raise ``RequestGenerationError`` with the strategy-specific kind.
"""

from __future__ import annotations

import json
import secrets
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from .errors import RequestGenerationError, RequestGenerationErrorKind
from .http.models import HTTPMethod, HttpRequest
from .http.url import append_query_string, form_query_string, query_value
from .xmlcodec import XMLCodecError, XMLEncoder

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml"

QUERY_METHODS = frozenset({HTTPMethod.GET, HTTPMethod.HEAD, HTTPMethod.DELETE})


class ParameterEncoding(Protocol):
    """Serializes resolved body parameters onto a draft request."""

    def encode(self, request: HttpRequest, parameters: Mapping[str, Any]) -> HttpRequest: ...


class URLEncodingDestination(str, Enum):
    METHOD_DEPENDENT = "method_dependent"
    QUERY_STRING = "query_string"
    HTTP_BODY = "http_body"


@dataclass(frozen=True)
class URLEncoding:
    """
    Form encoding. GET/HEAD/DELETE fold parameters into the query string unless the
    destination says otherwise; everything else gets a form body.
    """

    destination: URLEncodingDestination = URLEncodingDestination.METHOD_DEPENDENT

    def encodes_in_url(self, method: HTTPMethod) -> bool:
        if self.destination is URLEncodingDestination.QUERY_STRING:
            return True
        if self.destination is URLEncodingDestination.HTTP_BODY:
            return False
        return method in QUERY_METHODS

    def encode(self, request: HttpRequest, parameters: Mapping[str, Any]) -> HttpRequest:
        try:
            query = form_query_string(parameters)
        except Exception as exc:  # noqa: BLE001
            raise RequestGenerationError(RequestGenerationErrorKind.PARAMETER_ENCODING_FAILED, url=request.url, cause=exc) from exc

        if self.encodes_in_url(request.method):
            try:
                return request.with_url(append_query_string(request.url, query))
            except ValueError as exc:
                raise RequestGenerationError(RequestGenerationErrorKind.COMPONENTS, url=request.url, cause=exc) from exc
        return request.with_body(query.encode("utf-8"), content_type=FORM_CONTENT_TYPE)


@dataclass(frozen=True)
class JSONEncoding:
    sort_keys: bool = False

    def encode(self, request: HttpRequest, parameters: Mapping[str, Any]) -> HttpRequest:
        try:
            payload = json.dumps(dict(parameters), sort_keys=self.sort_keys, allow_nan=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise RequestGenerationError(RequestGenerationErrorKind.JSON_ENCODING_FAILED, url=request.url, cause=exc) from exc
        return request.with_body(payload.encode("utf-8"), content_type=JSON_CONTENT_TYPE)


@dataclass(frozen=True)
class XMLEncoding:
    root_tag: str = "root"

    def encode(self, request: HttpRequest, parameters: Mapping[str, Any]) -> HttpRequest:
        try:
            payload = XMLEncoder(self.root_tag).encode(dict(parameters))
        except XMLCodecError as exc:
            raise RequestGenerationError(RequestGenerationErrorKind.XML_ENCODING_FAILED, url=request.url, cause=exc) from exc
        return request.with_body(payload, content_type=XML_CONTENT_TYPE)


@dataclass(frozen=True)
class MultipartFile:
    """A file part for multipart bodies."""

    content: bytes
    filename: str = "file"
    content_type: str = "application/octet-stream"


def _check_token(value: str, what: str) -> str:
    if any(ch in value for ch in ('"', "\r", "\n")):
        raise ValueError(f"Invalid multipart {what}: {value!r}")
    return value


def _multipart_parts(parameters: Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    for name, value in parameters.items():
        if isinstance(value, (list, tuple)):
            for item in value:
                yield str(name), item
        else:
            yield str(name), value


def build_multipart_form_data(parameters: Mapping[str, Any], *, boundary: str) -> bytes:
    body = bytearray()
    for name, value in _multipart_parts(parameters):
        _check_token(name, "field name")
        body += f"--{boundary}\r\n".encode()
        if isinstance(value, MultipartFile):
            filename = _check_token(value.filename, "filename")
            body += f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'.encode()
            body += f"Content-Type: {_check_token(value.content_type, 'content type')}\r\n\r\n".encode()
            body += value.content
        elif isinstance(value, (bytes, bytearray)):
            body += f'Content-Disposition: form-data; name="{name}"\r\n'.encode()
            body += b"Content-Type: application/octet-stream\r\n\r\n"
            body += bytes(value)
        elif isinstance(value, Mapping):
            raise TypeError(f"Nested mapping is not a multipart value: {name}")
        else:
            body += f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode()
            body += query_value(value).encode("utf-8")
        body += b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return bytes(body)


@dataclass(frozen=True)
class MultipartEncoding:
    """multipart/form-data body; a boundary is generated per request when not fixed."""

    boundary: str | None = None

    def encode(self, request: HttpRequest, parameters: Mapping[str, Any]) -> HttpRequest:
        boundary = self.boundary or f"----FormBoundary{secrets.token_hex(8)}"
        try:
            body = build_multipart_form_data(parameters, boundary=boundary)
        except (TypeError, ValueError) as exc:
            raise RequestGenerationError(RequestGenerationErrorKind.MULTIPART_ENCODING_FAILED, url=request.url, cause=exc) from exc
        # Content-Type must carry the boundary used in the body.
        return request.with_body(body, content_type=f"multipart/form-data; boundary={boundary}", replace_content_type=True)


__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "JSONEncoding",
    "MultipartEncoding",
    "MultipartFile",
    "ParameterEncoding",
    "URLEncoding",
    "URLEncodingDestination",
    "XML_CONTENT_TYPE",
    "XMLEncoding",
    "build_multipart_form_data",
]
