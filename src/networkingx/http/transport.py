# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session managers: the injected capability that actually sends a request.

A session manager receives a fully built ``HttpRequest`` and reports the raw outcome
``(data, response, error)`` to a completion exactly once. It is also the interception seam for
credentials (subclass and add headers before delegating) and owns the set of acceptable
status codes.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Collection, Mapping
from typing import Protocol, Union

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import RequestCancelled
from .models import HttpRequest, HttpResponse, TransferProgress

logger = logging.getLogger(__name__)

Cause = Union[BaseException, str]
SessionCompletion = Callable[[Union[bytes, None], Union[HttpResponse, None], Union[Cause, None]], None]

DEFAULT_ACCEPTABLE_STATUS_CODES: Collection[int] = range(200, 300)


class NetworkCallable(Protocol):
    """Handle returned for an issued request."""

    def cancel(self) -> None: ...

    def resume(self) -> None: ...

    def suspend(self) -> None: ...

    @property
    def progress(self) -> TransferProgress: ...


class NetworkSessionManager(Protocol):
    """Executes requests and reports raw outcomes."""

    acceptable_status_codes: Collection[int]

    def request(self, request: HttpRequest, completion: SessionCompletion) -> NetworkCallable: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


class _Task:
    """Shared exactly-once completion bookkeeping for task handles."""

    def __init__(self, request: HttpRequest, completion: SessionCompletion):
        self.request = request
        self._completion = completion
        self._lock = threading.Lock()
        self._completed = False
        self._cancelled = threading.Event()
        self._progress = TransferProgress()

    @property
    def progress(self) -> TransferProgress:
        return self._progress

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_completed(self) -> bool:
        return self._completed

    def _finish(self, data: bytes | None, response: HttpResponse | None, error: Cause | None) -> None:
        with self._lock:
            if self._completed:
                return
            self._completed = True
        try:
            self._completion(data, response, error)
        except Exception:
            logger.exception("Completion handler failed for %s %s", self.request.method.value, self.request.url)


class HttpxTask(_Task):
    """
    A request running on its own daemon thread via ``httpx.Client.stream``.

    The body is read in chunks: ``cancel()`` aborts at the next chunk boundary and ``suspend()``
    blocks reading until ``resume()``.
    """

    def __init__(self, client: httpx.Client, settings: HttpSettings, request: HttpRequest, completion: SessionCompletion):
        super().__init__(request, completion)
        self._client = client
        self._settings = settings
        self._running = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> str:
        if self._completed:
            return "completed"
        if self._cancelled.is_set():
            return "canceling"
        return "running" if self._running.is_set() else "suspended"

    def resume(self) -> None:
        self._running.set()
        with self._lock:
            if self._thread is not None or self._completed:
                return
            self._thread = threading.Thread(target=self._run, name="networkingx-task", daemon=True)
        self._thread.start()

    def suspend(self) -> None:
        if not self._completed:
            self._running.clear()

    def cancel(self) -> None:
        self._cancelled.set()
        self._running.set()
        if self._thread is None:
            self._finish(None, None, RequestCancelled("cancelled before start"))

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _check_cancelled(self) -> None:
        self._running.wait()
        if self._cancelled.is_set():
            raise RequestCancelled("cancelled")

    def _run(self) -> None:
        request = self.request
        headers = dict(request.headers)
        if not any(key.lower() == "user-agent" for key in headers):
            headers["User-Agent"] = self._settings.user_agent

        try:
            self._check_cancelled()
            with self._client.stream(
                request.method.value,
                request.url,
                headers=headers,
                content=request.body,
                timeout=self._settings.timeout,
                follow_redirects=self._settings.allow_redirects,
            ) as resp:
                length = resp.headers.get("Content-Length")
                self._progress.total = int(length) if length and length.isdigit() else None
                content = bytearray()
                for chunk in resp.iter_bytes(self._settings.chunk_size):
                    self._check_cancelled()
                    if not chunk:
                        continue
                    content.extend(chunk)
                    self._progress.completed = len(content)
                self._check_cancelled()

                response = HttpResponse(
                    status_code=resp.status_code,
                    headers=dict(resp.headers),
                    url=str(resp.url),
                    meta={"http_version": resp.http_version},
                )
            self._finish(bytes(content), response, None)
        except Exception as exc:  # noqa: BLE001
            self._finish(None, None, exc)


class HttpxSessionManager:
    """Default session manager backed by a shared ``httpx.Client``."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        *,
        acceptable_status_codes: Collection[int] = DEFAULT_ACCEPTABLE_STATUS_CODES,
    ):
        self.settings = settings or load_http_settings()
        self.acceptable_status_codes = acceptable_status_codes
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def request(self, request: HttpRequest, completion: SessionCompletion) -> HttpxTask:
        task = HttpxTask(self._client, self.settings, request, completion)
        task.resume()
        return task

    def close(self) -> None:
        self._client.close()


Outcome = tuple[Union[bytes, None], Union[HttpResponse, None], Union[Cause, None]]


class StubTask(_Task):
    def __init__(self, request: HttpRequest, completion: SessionCompletion, outcome: Outcome):
        super().__init__(request, completion)
        self._outcome = outcome
        self._suspended = False

    def resume(self) -> None:
        self._suspended = False

    def suspend(self) -> None:
        self._suspended = True

    def cancel(self) -> None:
        self._cancelled.set()
        self._finish(None, None, RequestCancelled("cancelled"))

    def complete(self) -> None:
        data, _, _ = self._outcome
        if data is not None:
            self._progress.total = len(data)
            self._progress.completed = len(data)
        self._finish(*self._outcome)


class StubSessionManager:
    """Deterministic, programmable session manager for tests.

    Outcomes are keyed by URL (query included). With ``deferred=True`` tasks stay pending until
    ``flush()`` so cancellation and dispatch ordering can be exercised.
    """

    def __init__(
        self,
        outcomes: Mapping[str, Outcome] | None = None,
        *,
        default: Outcome | None = None,
        deferred: bool = False,
        acceptable_status_codes: Collection[int] = DEFAULT_ACCEPTABLE_STATUS_CODES,
    ):
        self._outcomes = dict(outcomes or {})
        self._default = default or (None, None, "No stubbed response configured")
        self.deferred = deferred
        self.acceptable_status_codes = acceptable_status_codes
        self.requests: list[HttpRequest] = []
        self.pending: list[StubTask] = []
        self.closed = False

    def add(self, url: str, data: bytes | None = None, response: HttpResponse | None = None, error: Cause | None = None) -> None:
        self._outcomes[url] = (data, response, error)

    def request(self, request: HttpRequest, completion: SessionCompletion) -> StubTask:
        self.requests.append(request)
        task = StubTask(request, completion, self._outcomes.get(request.url, self._default))
        if self.deferred:
            self.pending.append(task)
        else:
            task.complete()
        return task

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for task in pending:
            task.complete()

    def close(self) -> None:
        self.closed = True


__all__ = [
    "DEFAULT_ACCEPTABLE_STATUS_CODES",
    "HttpxSessionManager",
    "HttpxTask",
    "NetworkCallable",
    "NetworkSessionManager",
    "SessionCompletion",
    "StubSessionManager",
    "StubTask",
]
