# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the request builder and parameter encodings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

from ..errors import RequestGenerationError, RequestGenerationErrorKind

QueryItems = list[tuple[str, str]]


def as_url(value: Any) -> str:
    """
    Return ``value`` as an absolute URL string or raise ``RequestGenerationError(invalid_url)``.

    Accepts strings and anything whose ``str()`` is a URL (e.g. ``httpx.URL``).
    """
    raw = str(value if value is not None else "")
    if not raw or any(ch.isspace() for ch in raw):
        raise RequestGenerationError(RequestGenerationErrorKind.INVALID_URL, url=raw)
    try:
        parts = urlsplit(raw)
        parts.port  # noqa: B018 - validates the port component
    except ValueError as exc:
        raise RequestGenerationError(RequestGenerationErrorKind.INVALID_URL, url=raw, cause=exc) from exc
    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise RequestGenerationError(RequestGenerationErrorKind.INVALID_URL, url=raw)
    return raw


def join_base_url(base_url: str, path: str) -> str:
    """
    Append ``path`` to ``base_url`` with exactly one ``/`` between them.

    Example:
      http://host/api  + users  -> http://host/api/users
      http://host/api/ + /users -> http://host/api/users
    """
    return f"{str(base_url).rstrip('/')}/{str(path or '').lstrip('/')}"


def query_value(value: Any) -> str:
    """Render a scalar the way it appears in a query string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query_items(items: Iterable[tuple[str, str]]) -> str:
    return "&".join(f"{quote(str(name), safe='')}={quote(str(value), safe='')}" for name, value in items)


def apply_query_items(url: str, items: Sequence[tuple[str, str]]) -> str:
    """
    Replace the query of ``url`` with ``items``; an empty list leaves the URL without a query.
    """
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise RequestGenerationError(RequestGenerationErrorKind.COMPONENTS, url=url, cause=exc) from exc
    query = encode_query_items(items) if items else ""
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def append_query_string(url: str, query: str) -> str:
    """Append an already-encoded query string, keeping any existing query."""
    if not query:
        return url
    parts = urlsplit(url)
    merged = f"{parts.query}&{query}" if parts.query else query
    return urlunsplit((parts.scheme, parts.netloc, parts.path, merged, parts.fragment))


def _form_components(key: str, value: Any) -> QueryItems:
    if isinstance(value, Mapping):
        out: QueryItems = []
        for nested_key in sorted(value, key=str):
            out.extend(_form_components(f"{key}[{nested_key}]", value[nested_key]))
        return out
    if isinstance(value, (list, tuple)):
        out = []
        for item in value:
            out.extend(_form_components(f"{key}[]", item))
        return out
    return [(key, query_value(value))]


def form_query_string(parameters: Mapping[str, Any]) -> str:
    """
    Percent-encode a parameter mapping as ``application/x-www-form-urlencoded``.

    Keys are sorted; nested mappings use ``key[sub]`` and sequences use ``key[]``.
    """
    items: QueryItems = []
    for key in sorted(parameters, key=str):
        items.extend(_form_components(str(key), parameters[key]))
    return encode_query_items(items)


__all__ = [
    "QueryItems",
    "append_query_string",
    "apply_query_items",
    "as_url",
    "encode_query_items",
    "form_query_string",
    "join_base_url",
    "query_value",
]
