# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Completion dispatchers.

Session managers finish on worker threads; a dispatcher redelivers each final completion onto
the application's primary context (an asyncio loop, a UI thread draining a queue, or inline).
"""

from __future__ import annotations

import asyncio
import queue
from collections.abc import Callable
from typing import Any, Protocol


class CompletionDispatcher(Protocol):
    def dispatch(self, callback: Callable[..., Any], *args: Any) -> None: ...


class ImmediateDispatcher:
    """Invoke completions on whichever thread produced them."""

    def dispatch(self, callback: Callable[..., Any], *args: Any) -> None:
        callback(*args)


class AsyncioDispatcher:
    """Schedule completions onto an event loop (thread-safe)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop or asyncio.get_running_loop()

    def dispatch(self, callback: Callable[..., Any], *args: Any) -> None:
        self.loop.call_soon_threadsafe(callback, *args)


class QueueDispatcher:
    """
    FIFO hand-off to a primary thread that calls ``run_pending()`` (e.g. from its UI loop).

    Completions are delivered in arrival order.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[tuple[Callable[..., Any], tuple[Any, ...]]] = queue.SimpleQueue()

    def dispatch(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.put((callback, args))

    def run_pending(self, *, block: bool = False, timeout: float | None = None) -> int:
        """Deliver queued completions; returns how many ran."""
        delivered = 0
        while True:
            try:
                if block and delivered == 0:
                    callback, args = self._queue.get(timeout=timeout)
                else:
                    callback, args = self._queue.get_nowait()
            except queue.Empty:
                return delivered
            callback(*args)
            delivered += 1

    def __len__(self) -> int:
        return self._queue.qsize()


__all__ = ["AsyncioDispatcher", "CompletionDispatcher", "ImmediateDispatcher", "QueueDispatcher"]
