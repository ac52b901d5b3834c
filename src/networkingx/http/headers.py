# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header helpers.

HTTP header field names are case-insensitive (RFC 9110) but requests carry plain dicts, so
lookups scan case-insensitively while merges keep the caller's spelling.
"""

from __future__ import annotations

from collections.abc import Mapping


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """
    Overlay header mappings left to right; later layers win for the same key.

    Keys that differ only by case are treated as the same header and the latest spelling is kept.
    """
    merged: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key is None:
                continue
            name = str(key)
            for existing in [k for k in merged if k.lower() == name.lower() and k != name]:
                del merged[existing]
            merged[name] = "" if value is None else str(value)
    return merged


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths the exact key before falling back to a full scan.
    """
    if not headers or not name:
        return default

    if name in headers:
        value = headers[name]
        return default if value is None else str(value).strip()

    lower = name.lower()
    for key, value in headers.items():
        if key is not None and str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


__all__ = ["header_value", "merge_headers"]
