# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data-transfer layer: decode successful payloads, resolve network failures."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from typing import Any, Protocol

from .dispatch import CompletionDispatcher, ImmediateDispatcher
from .endpoint import ResponseRequestable
from .errors import NetworkError, TransferError
from .http.transport import NetworkCallable
from .network import NetworkService
from .result import Result

logger = logging.getLogger(__name__)

TransferCompletion = Callable[[Result[Any, TransferError]], None]


class DataTransferService(Protocol):
    def request(self, endpoint: ResponseRequestable, completion: TransferCompletion) -> NetworkCallable | None: ...


class DataTransferErrorResolver(Protocol):
    """Maps a NetworkError to an application error (or returns it unchanged)."""

    def resolve(self, error: NetworkError) -> BaseException: ...


class DataTransferErrorLogger(Protocol):
    def log_error(self, error: BaseException) -> None: ...


class DefaultDataTransferErrorResolver:
    def resolve(self, error: NetworkError) -> BaseException:
        return error


class DefaultDataTransferErrorLogger:
    def log_error(self, error: BaseException) -> None:
        logger.debug("%s", error)


class DefaultDataTransferService:
    def __init__(
        self,
        network_service: NetworkService,
        error_resolver: DataTransferErrorResolver | None = None,
        error_logger: DataTransferErrorLogger | None = None,
        dispatcher: CompletionDispatcher | None = None,
    ):
        self.network_service = network_service
        self.error_resolver = error_resolver or DefaultDataTransferErrorResolver()
        self.error_logger = error_logger or DefaultDataTransferErrorLogger()
        self.dispatcher = dispatcher or ImmediateDispatcher()

    def request(self, endpoint: ResponseRequestable, completion: TransferCompletion) -> NetworkCallable | None:
        """
        Issue ``endpoint`` and deliver exactly one ``Result`` to ``completion`` via the dispatcher.

        Void endpoints (``response_type is None``) succeed with ``None`` regardless of the body.
        """

        def on_network_result(result: Result[bytes, NetworkError]) -> None:
            if result.ok:
                outcome = Result.success(None) if endpoint.response_type is None else self.decode(result.value, endpoint)
            else:
                self._log(result.error)
                outcome = Result.failure(self.resolve(result.error))
            self.dispatcher.dispatch(completion, outcome)

        return self.network_service.request(endpoint, on_network_result)

    def decode(self, data: bytes | None, endpoint: ResponseRequestable) -> Result[Any, TransferError]:
        if data is None:
            return Result.failure(TransferError.no_response_body())
        try:
            return Result.success(endpoint.response_decoder.decode(data, endpoint.response_type))
        except Exception as exc:  # noqa: BLE001
            self._log(exc)
            return Result.failure(TransferError.decoding_failed(exc))

    def resolve(self, error: NetworkError) -> TransferError:
        resolved = self.error_resolver.resolve(error)
        if isinstance(resolved, NetworkError):
            return TransferError.network(resolved)
        return TransferError.resolved_failure(resolved)

    def _log(self, error: BaseException) -> None:
        with suppress(Exception):
            self.error_logger.log_error(error)


__all__ = [
    "DataTransferErrorLogger",
    "DataTransferErrorResolver",
    "DataTransferService",
    "DefaultDataTransferErrorLogger",
    "DefaultDataTransferErrorResolver",
    "DefaultDataTransferService",
    "TransferCompletion",
]
