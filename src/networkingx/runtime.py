# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level NetworkingX facade wiring config, session manager and services."""

from __future__ import annotations

import threading
from contextlib import suppress
from typing import Any

from .config import ApiDataNetworkConfig, HttpSettings, load_http_settings
from .dispatch import CompletionDispatcher, ImmediateDispatcher
from .endpoint import ResponseRequestable
from .errors import NetworkError, TransferError
from .http.transport import HttpxSessionManager, NetworkCallable, NetworkSessionManager
from .network import DefaultNetworkService, NetworkErrorLogger
from .result import Result
from .transfer import (
    DataTransferErrorLogger,
    DataTransferErrorResolver,
    DefaultDataTransferService,
    TransferCompletion,
)

FETCH_CANCEL_GRACE = 1.0


class NetworkingX:
    """
    Convenience wrapper sharing one session manager between the network and data-transfer layers.

    The session manager is closed on ``close()``/context exit only when the facade created it.
    """

    def __init__(
        self,
        config: ApiDataNetworkConfig,
        session_manager: NetworkSessionManager | None = None,
        *,
        settings: HttpSettings | None = None,
        logger: NetworkErrorLogger | None = None,
        error_resolver: DataTransferErrorResolver | None = None,
        error_logger: DataTransferErrorLogger | None = None,
        dispatcher: CompletionDispatcher | None = None,
    ):
        self.config = config
        self._owns_session = session_manager is None
        self.session_manager = session_manager or HttpxSessionManager(settings or load_http_settings())
        self.network_service = DefaultNetworkService(config, self.session_manager, logger)
        self.error_resolver = error_resolver
        self.error_logger = error_logger
        self.transfer_service = DefaultDataTransferService(
            self.network_service,
            error_resolver=error_resolver,
            error_logger=error_logger,
            dispatcher=dispatcher,
        )

    def request(self, endpoint: ResponseRequestable, completion: TransferCompletion) -> NetworkCallable | None:
        return self.transfer_service.request(endpoint, completion)

    def fetch(
        self,
        endpoint: ResponseRequestable,
        timeout: float | None = None,
        *,
        cancel_grace: float = FETCH_CANCEL_GRACE,
    ) -> Result[Any, TransferError]:
        """
        Block the calling thread until the request completes or ``timeout`` expires.

        On timeout the task is cancelled and given ``cancel_grace`` seconds to report; a transport
        still blocked after that yields a ``cancelled`` failure and its late completion is dropped.
        Completions are delivered inline here, so this must not be used from the thread a
        ``QueueDispatcher`` delivers on.
        """
        done = threading.Event()
        box: list[Result[Any, TransferError]] = []

        def completion(result: Result[Any, TransferError]) -> None:
            box.append(result)
            done.set()

        service = DefaultDataTransferService(
            self.network_service,
            error_resolver=self.error_resolver,
            error_logger=self.error_logger,
            dispatcher=ImmediateDispatcher(),
        )
        task = service.request(endpoint, completion)
        if not done.wait(timeout) and task is not None:
            task.cancel()
            if not done.wait(cancel_grace):
                return Result.failure(service.resolve(NetworkError.cancelled()))
        return box[0]

    def close(self) -> None:
        if self._owns_session:
            with suppress(Exception):
                self.session_manager.close()

    def __enter__(self) -> NetworkingX:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["NetworkingX"]
