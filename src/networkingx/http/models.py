# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across NetworkingX."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from .headers import header_value

Headers = Mapping[str, str]


class HTTPMethod(str, Enum):
    """HTTP verbs, compared by their exact upper-case value."""

    CONNECT = "CONNECT"
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, value: str | HTTPMethod) -> HTTPMethod:
        """Case-sensitive lookup: ``"get"`` is not a method."""
        if isinstance(value, HTTPMethod):
            return value
        return cls(value)


@dataclass(frozen=True)
class HttpRequest:
    """Transport-ready request. Derived once per call and never mutated afterwards."""

    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod.parse(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)

    def with_url(self, url: str) -> HttpRequest:
        return replace(self, url=url)

    def with_body(
        self, body: bytes | None, *, content_type: str | None = None, replace_content_type: bool = False
    ) -> HttpRequest:
        """Return a copy carrying ``body``; ``content_type`` is only applied when unset unless replacing."""
        headers = dict(self.headers)
        if content_type and replace_content_type:
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
        if content_type and not header_value(headers, "Content-Type"):
            headers["Content-Type"] = content_type
        return replace(self, body=body, headers=headers)


@dataclass(frozen=True)
class HttpResponse:
    """Status metadata reported by a session manager for a completed attempt."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    url: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)


@dataclass
class TransferProgress:
    """Byte counters for an in-flight task; ``total`` is None when the length is unknown."""

    completed: int = 0
    total: int | None = None

    @property
    def fraction(self) -> float | None:
        if not self.total:
            return None
        return min(1.0, self.completed / self.total)
