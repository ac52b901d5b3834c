# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Network layer: build, send and classify one request."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from contextlib import suppress
from typing import Protocol

from .config import ApiDataNetworkConfig
from .endpoint import Requestable
from .errors import NetworkError, RequestGenerationError, categorize_exception
from .http.models import HttpRequest, HttpResponse
from .http.transport import Cause, HttpxSessionManager, NetworkCallable, NetworkSessionManager
from .result import Result

logger = logging.getLogger(__name__)

NetworkCompletion = Callable[[Result[bytes, NetworkError]], None]


class NetworkService(Protocol):
    def request(self, endpoint: Requestable, completion: NetworkCompletion) -> NetworkCallable | None: ...


class NetworkErrorLogger(Protocol):
    """Observes every attempt. Implementations must be safe to call from worker threads."""

    def log_request(self, request: HttpRequest) -> None: ...

    def log_response(self, data: bytes | None, response: HttpResponse | None) -> None: ...

    def log_error(self, error: BaseException) -> None: ...


def _describe_body(body: bytes | None) -> str | None:
    if not body:
        return None
    try:
        return repr(json.loads(body))
    except ValueError:
        return body.decode("utf-8", errors="replace")


class DefaultNetworkErrorLogger:
    """Logs requests, responses and errors at DEBUG via the module logger."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def log_request(self, request: HttpRequest) -> None:
        if not self._log.isEnabledFor(logging.DEBUG):
            return
        self._log.debug("request: %s %s", request.method.value, request.url)
        self._log.debug("headers: %s", dict(request.headers))
        body = _describe_body(request.body)
        if body is not None:
            self._log.debug("body: %s", body)

    def log_response(self, data: bytes | None, response: HttpResponse | None) -> None:
        if response is not None:
            self._log.debug("response: %s %s", response.status_code, response.url or "")
        body = _describe_body(data)
        if body is not None:
            self._log.debug("responseData: %s", body)

    def log_error(self, error: BaseException) -> None:
        self._log.debug("%s", error)


class DefaultNetworkService:
    """
    Builds requests from endpoints and classifies session-manager outcomes.

    A status code in ``acceptable_status_codes`` means success even when the session manager
    also reported an error object; some transports leave a stale error on reused sessions.
    """

    def __init__(
        self,
        config: ApiDataNetworkConfig,
        session_manager: NetworkSessionManager | None = None,
        logger: NetworkErrorLogger | None = None,
    ):
        self.config = config
        self.session_manager = session_manager or HttpxSessionManager()
        self.logger = logger or DefaultNetworkErrorLogger()

    def request(self, endpoint: Requestable, completion: NetworkCompletion) -> NetworkCallable | None:
        try:
            request = endpoint.url_request(self.config)
        except RequestGenerationError as exc:
            error = NetworkError.url_generation_failed(exc)
            self._log(self.logger.log_error, error)
            completion(Result.failure(error))
            return None
        return self.send(request, completion)

    def send(self, request: HttpRequest, completion: NetworkCompletion) -> NetworkCallable:
        """Issue an already-built request."""

        def on_complete(data: bytes | None, response: HttpResponse | None, cause: Cause | None) -> None:
            result = self.classify(data, response, cause)
            if result.ok:
                self._log(self.logger.log_response, data, response)
            else:
                self._log(self.logger.log_error, result.error)
            completion(result)

        self._log(self.logger.log_request, request)
        return self.session_manager.request(request, on_complete)

    def classify(self, data: bytes | None, response: HttpResponse | None, cause: Cause | None) -> Result[bytes, NetworkError]:
        if response is not None:
            if response.status_code in self.session_manager.acceptable_status_codes:
                return Result.success(data)
            if data is not None:
                return Result.failure(NetworkError.http_status(response.status_code, data))
            if cause is not None:
                return Result.failure(categorize_exception(cause))
            return Result.failure(NetworkError.unacceptable_status_code(response.status_code))

        if cause is not None:
            return Result.failure(categorize_exception(cause))
        return Result.success(data)

    @staticmethod
    def _log(method: Callable[..., None], *args: object) -> None:
        with suppress(Exception):
            method(*args)


__all__ = [
    "DefaultNetworkErrorLogger",
    "DefaultNetworkService",
    "NetworkCompletion",
    "NetworkErrorLogger",
    "NetworkService",
]
