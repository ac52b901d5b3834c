# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for NetworkingX."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .version import __version__

DEFAULT_USER_AGENT = f"NetworkingX/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ApiDataNetworkConfig:
    """
    Base settings shared by every request: base URL, default headers and default query parameters.

    Created once at application start. The mappings are copied and frozen so a config can be
    shared across concurrent requests without coordination.
    """

    base_url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query_parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", str(self.base_url))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))
        object.__setattr__(self, "query_parameters", MappingProxyType(dict(self.query_parameters or {})))


@dataclass
class HttpSettings:
    """Transport defaults for the httpx-backed session manager."""

    timeout: float = 60.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    chunk_size: int = 64 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        chunk_size = _int_env("NETWORKINGX_HTTP_CHUNK_SIZE", cls.chunk_size)
        if chunk_size <= 0:
            chunk_size = cls.chunk_size
        return cls(
            timeout=_float_env("NETWORKINGX_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("NETWORKINGX_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("NETWORKINGX_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("NETWORKINGX_HTTP_VERIFY_SSL", cls.verify_ssl),
            chunk_size=chunk_size,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
