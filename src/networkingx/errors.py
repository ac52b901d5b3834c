# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers.

Two tiers are modeled:

- ``NetworkError`` classifies a failed or non-acceptable HTTP attempt.
- ``TransferError`` classifies failures one level up (missing body, decoding, resolved errors).

Request building raises ``RequestGenerationError``; the network layer folds those into
``NetworkError.url_generation_failed`` so callers only ever see one failure surface.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import socket
from enum import Enum
from typing import Any


class RequestCancelled(Exception):
    """Raised by session managers when a task is cancelled before it completes."""


class RequestGenerationErrorKind(str, Enum):
    COMPONENTS = "components"
    INVALID_URL = "invalid_url"
    PARAMETER_ENCODING_FAILED = "parameter_encoding_failed"
    JSON_ENCODING_FAILED = "json_encoding_failed"
    XML_ENCODING_FAILED = "xml_encoding_failed"
    MULTIPART_ENCODING_FAILED = "multipart_encoding_failed"


class RequestGenerationError(Exception):
    """Failure while turning an endpoint + config into an HttpRequest."""

    def __init__(self, kind: RequestGenerationErrorKind, *, url: str | None = None, cause: BaseException | None = None):
        self.kind = kind
        self.url = url
        self.cause = cause
        detail = f" ({url})" if url is not None else ""
        if cause is not None:
            detail += f": {cause}"
        super().__init__(f"{kind.value}{detail}")


class NetworkErrorKind(str, Enum):
    CANCELLED = "cancelled"
    HTTP_STATUS = "http_status"
    TRANSPORT_FAILURE = "transport_failure"
    MESSAGE = "message"
    NOT_CONNECTED = "not_connected"
    TIMED_OUT = "timed_out"
    UNACCEPTABLE_STATUS_CODE = "unacceptable_status_code"
    URL_GENERATION_FAILED = "url_generation_failed"


class NetworkError(Exception):
    """Classification of a failed or non-2xx HTTP attempt."""

    def __init__(
        self,
        kind: NetworkErrorKind,
        *,
        status_code: int | None = None,
        data: bytes | None = None,
        cause: BaseException | None = None,
        message: str | None = None,
    ):
        self.kind = kind
        self.status_code = status_code
        self.data = data
        self.cause = cause
        self.message = message
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is NetworkErrorKind.HTTP_STATUS:
            size = len(self.data) if self.data is not None else 0
            return f"HTTP {self.status_code} ({size} bytes)"
        if self.kind is NetworkErrorKind.UNACCEPTABLE_STATUS_CODE:
            return f"Unacceptable status code {self.status_code}"
        if self.kind is NetworkErrorKind.MESSAGE:
            return str(self.message)
        if self.cause is not None:
            return f"{self.kind.value}: {type(self.cause).__name__}: {self.cause}"
        return self.kind.value

    def __repr__(self) -> str:
        return f"NetworkError({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkError):
            return NotImplemented
        return (self.kind, self.status_code, self.data, self.cause, self.message) == (
            other.kind,
            other.status_code,
            other.data,
            other.cause,
            other.message,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.status_code, self.data, self.message))

    @classmethod
    def cancelled(cls, cause: BaseException | None = None) -> NetworkError:
        return cls(NetworkErrorKind.CANCELLED, cause=cause)

    @classmethod
    def http_status(cls, status_code: int, data: bytes | None) -> NetworkError:
        return cls(NetworkErrorKind.HTTP_STATUS, status_code=status_code, data=data)

    @classmethod
    def transport_failure(cls, cause: BaseException) -> NetworkError:
        return cls(NetworkErrorKind.TRANSPORT_FAILURE, cause=cause)

    @classmethod
    def from_message(cls, message: str) -> NetworkError:
        return cls(NetworkErrorKind.MESSAGE, message=message)

    @classmethod
    def not_connected(cls, cause: BaseException | None = None) -> NetworkError:
        return cls(NetworkErrorKind.NOT_CONNECTED, cause=cause)

    @classmethod
    def timed_out(cls, cause: BaseException | None = None) -> NetworkError:
        return cls(NetworkErrorKind.TIMED_OUT, cause=cause)

    @classmethod
    def unacceptable_status_code(cls, status_code: int) -> NetworkError:
        return cls(NetworkErrorKind.UNACCEPTABLE_STATUS_CODE, status_code=status_code)

    @classmethod
    def url_generation_failed(cls, cause: BaseException | None = None) -> NetworkError:
        return cls(NetworkErrorKind.URL_GENERATION_FAILED, cause=cause)

    def has_status_code(self, status_code: int) -> bool:
        """True only for ``http_status`` errors carrying the given code."""
        return self.kind is NetworkErrorKind.HTTP_STATUS and self.status_code == status_code

    @property
    def is_not_found_error(self) -> bool:
        return self.has_status_code(404)


class TransferErrorKind(str, Enum):
    NO_RESPONSE_BODY = "no_response_body"
    DECODING_FAILED = "decoding_failed"
    NETWORK = "network"
    RESOLVED_FAILURE = "resolved_failure"


class TransferError(Exception):
    """Failure surfaced by the data-transfer layer."""

    def __init__(self, kind: TransferErrorKind, *, cause: BaseException | None = None):
        self.kind = kind
        self.cause = cause
        super().__init__(kind.value if cause is None else f"{kind.value}: {cause}")

    def __repr__(self) -> str:
        return f"TransferError({self})"

    @classmethod
    def no_response_body(cls) -> TransferError:
        return cls(TransferErrorKind.NO_RESPONSE_BODY)

    @classmethod
    def decoding_failed(cls, cause: BaseException) -> TransferError:
        return cls(TransferErrorKind.DECODING_FAILED, cause=cause)

    @classmethod
    def network(cls, error: NetworkError) -> TransferError:
        return cls(TransferErrorKind.NETWORK, cause=error)

    @classmethod
    def resolved_failure(cls, error: BaseException) -> TransferError:
        return cls(TransferErrorKind.RESOLVED_FAILURE, cause=error)

    @property
    def network_error(self) -> NetworkError | None:
        """The wrapped NetworkError for ``network`` failures."""
        return self.cause if isinstance(self.cause, NetworkError) else None


def categorize_exception(cause: Any) -> NetworkError:
    """
    Map transport-level causes (httpx/socket/stdlib exceptions) to NetworkError.
    """
    import httpx

    if isinstance(cause, NetworkError):
        return cause

    if isinstance(cause, str):
        return NetworkError.from_message(cause)

    if isinstance(cause, (RequestCancelled, concurrent.futures.CancelledError, asyncio.CancelledError)):
        return NetworkError.cancelled(cause)

    if isinstance(cause, (httpx.TimeoutException, TimeoutError, socket.timeout)):
        return NetworkError.timed_out(cause)

    if isinstance(cause, (httpx.ConnectError, httpx.ProxyError)):
        return NetworkError.not_connected(cause)

    if isinstance(cause, (socket.gaierror, socket.herror, ConnectionRefusedError)):
        return NetworkError.not_connected(cause)

    # Resets and broken pipes mid-transfer land here.
    if isinstance(cause, BaseException):
        return NetworkError.transport_failure(cause)

    return NetworkError.from_message(str(cause))


__all__ = [
    "NetworkError",
    "NetworkErrorKind",
    "RequestCancelled",
    "RequestGenerationError",
    "RequestGenerationErrorKind",
    "TransferError",
    "TransferErrorKind",
    "categorize_exception",
]
