# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response decoders selected per endpoint."""

from __future__ import annotations

import json
from typing import Any, Protocol

from pydantic import TypeAdapter

from .xmlcodec import XMLDecoder


class ResponseDecoder(Protocol):
    """Turns raw response bytes into an instance of ``response_type`` or raises."""

    def decode(self, data: bytes, response_type: Any) -> Any: ...


def _validate(value: Any, response_type: Any) -> Any:
    if response_type is Any:
        return value
    return TypeAdapter(response_type).validate_python(value)


class JSONResponseDecoder:
    def decode(self, data: bytes, response_type: Any) -> Any:
        return _validate(json.loads(data), response_type)


class RawDataResponseDecoder:
    """Identity decoder; only valid for endpoints whose response type is ``bytes``."""

    def decode(self, data: bytes, response_type: Any) -> Any:
        if response_type is not bytes:
            name = getattr(response_type, "__name__", repr(response_type))
            raise TypeError(f"Expected bytes response type, got {name}")
        return bytes(data)


class XMLResponseDecoder:
    def __init__(self) -> None:
        self._decoder = XMLDecoder()

    def decode(self, data: bytes, response_type: Any) -> Any:
        return self._decoder.decode(data, response_type)


__all__ = ["JSONResponseDecoder", "RawDataResponseDecoder", "ResponseDecoder", "XMLResponseDecoder"]
