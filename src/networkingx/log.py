# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for NetworkingX."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("NETWORKINGX_LOG_LEVEL", "WARNING").upper()

# httpx/httpcore log every connection event at INFO/DEBUG; only surface them when tracing.
_NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: str | None = None) -> int:
    """Map a level name to a logging constant, falling back to WARNING."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    resolved = getattr(logging, effective_level, logging.WARNING)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    resolved = resolve_level(level)
    logging.basicConfig(
        level=resolved,
        format="%(levelname)s %(name)s: %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(resolved if resolved <= logging.DEBUG else logging.WARNING)


__all__ = ["resolve_level", "setup_logging"]
