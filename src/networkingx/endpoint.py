# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Declarative endpoints and the request builder.

``build_request`` deterministically merges an endpoint with an ``ApiDataNetworkConfig``:

1. target URL: ``path`` verbatim for full paths, else base URL + ``/`` + path
2. query items: endpoint parameters (model if set, else the free-form mapping), then config
   defaults; duplicates are appended, never overwritten
3. headers: config defaults overlaid by endpoint headers (endpoint wins)
4. body: model if set, else free-form mapping; encoded only when non-empty
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter

from .config import ApiDataNetworkConfig
from .decoding import JSONResponseDecoder, ResponseDecoder
from .encoding import JSONEncoding, ParameterEncoding
from .errors import RequestGenerationError, RequestGenerationErrorKind
from .http.headers import merge_headers
from .http.models import HTTPMethod, HttpRequest
from .http.url import QueryItems, apply_query_items, as_url, join_base_url, query_value

R = TypeVar("R")


class Requestable(Protocol):
    path: str
    is_full_path: bool
    method: HTTPMethod
    header_parameters: Mapping[str, str]
    query_model: Any | None
    query_parameters: Mapping[str, Any]
    body_model: Any | None
    body_parameters: Mapping[str, Any]
    body_encoding: ParameterEncoding

    def url_request(self, config: ApiDataNetworkConfig) -> HttpRequest: ...


class ResponseRequestable(Requestable, Protocol):
    response_type: Any
    response_decoder: ResponseDecoder


@dataclass(frozen=True)
class Endpoint(Generic[R]):
    """
    One API call. ``response_type`` is the type the payload decodes into; ``None`` marks an
    endpoint whose response body is ignored.
    """

    path: str
    method: HTTPMethod = HTTPMethod.GET
    is_full_path: bool = False
    header_parameters: Mapping[str, str] = field(default_factory=dict)
    query_model: Any | None = None
    query_parameters: Mapping[str, Any] = field(default_factory=dict)
    body_model: Any | None = None
    body_parameters: Mapping[str, Any] = field(default_factory=dict)
    body_encoding: ParameterEncoding = field(default_factory=JSONEncoding)
    response_decoder: ResponseDecoder = field(default_factory=JSONResponseDecoder)
    response_type: Any = Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod.parse(self.method))

    @property
    def is_void(self) -> bool:
        return self.response_type is None

    def url(self, config: ApiDataNetworkConfig) -> str:
        return build_url(self, config)

    def url_request(self, config: ApiDataNetworkConfig) -> HttpRequest:
        return build_request(self, config)


def to_parameters(model: Any) -> dict[str, Any]:
    """
    Flatten a structured value (dataclass, pydantic model, TypedDict, mapping) to a JSON-ready dict.
    """
    if isinstance(model, Mapping):
        return dict(model)
    try:
        dumped = TypeAdapter(type(model)).dump_python(model, mode="json")
    except Exception as exc:  # noqa: BLE001
        raise RequestGenerationError(RequestGenerationErrorKind.PARAMETER_ENCODING_FAILED, cause=exc) from exc
    if not isinstance(dumped, Mapping):
        raise RequestGenerationError(
            RequestGenerationErrorKind.PARAMETER_ENCODING_FAILED,
            cause=TypeError(f"{type(model).__name__} does not serialize to a mapping"),
        )
    return dict(dumped)


def resolve_parameters(model: Any | None, parameters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Structured value wins when present; the free-form mapping is then ignored entirely."""
    if model is not None:
        return to_parameters(model)
    return dict(parameters or {})


def build_url(endpoint: Requestable, config: ApiDataNetworkConfig) -> str:
    if endpoint.is_full_path:
        target = endpoint.path
    else:
        target = join_base_url(as_url(config.base_url), endpoint.path)

    try:
        url = as_url(target)
    except RequestGenerationError as exc:
        raise RequestGenerationError(RequestGenerationErrorKind.COMPONENTS, url=target, cause=exc) from exc

    items: QueryItems = []
    for key, value in resolve_parameters(endpoint.query_model, endpoint.query_parameters).items():
        items.append((str(key), query_value(value)))
    for key, value in config.query_parameters.items():
        items.append((str(key), query_value(value)))
    return apply_query_items(url, items)


def build_request(endpoint: Requestable, config: ApiDataNetworkConfig) -> HttpRequest:
    """Build the transport-ready request or raise ``RequestGenerationError``."""
    request = HttpRequest(
        url=build_url(endpoint, config),
        method=endpoint.method,
        headers=merge_headers(config.headers, endpoint.header_parameters),
    )
    body_parameters = resolve_parameters(endpoint.body_model, endpoint.body_parameters)
    if body_parameters:
        request = endpoint.body_encoding.encode(request, body_parameters)
    return request


__all__ = [
    "Endpoint",
    "Requestable",
    "ResponseRequestable",
    "build_request",
    "build_url",
    "resolve_parameters",
    "to_parameters",
]
