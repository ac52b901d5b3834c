# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP models, URL helpers and session managers."""

from .headers import header_value, merge_headers
from .models import Headers, HTTPMethod, HttpRequest, HttpResponse, TransferProgress
from .transport import (
    DEFAULT_ACCEPTABLE_STATUS_CODES,
    HttpxSessionManager,
    HttpxTask,
    NetworkCallable,
    NetworkSessionManager,
    StubSessionManager,
)
from .url import as_url, form_query_string, join_base_url

__all__ = [
    "DEFAULT_ACCEPTABLE_STATUS_CODES",
    "HTTPMethod",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxSessionManager",
    "HttpxTask",
    "NetworkCallable",
    "NetworkSessionManager",
    "StubSessionManager",
    "TransferProgress",
    "as_url",
    "form_query_string",
    "header_value",
    "join_base_url",
    "merge_headers",
]
