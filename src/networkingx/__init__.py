# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
NetworkingX package entrypoint.

A thin REST layer over an injectable HTTP session manager. Endpoints are declarative
dataclasses; a pure builder turns them into requests, the network layer classifies raw outcomes
into ``NetworkError`` values and the data-transfer layer decodes payloads into typed results.
"""

from .config import ApiDataNetworkConfig, HttpSettings, load_http_settings
from .decoding import JSONResponseDecoder, RawDataResponseDecoder, ResponseDecoder, XMLResponseDecoder
from .dispatch import AsyncioDispatcher, CompletionDispatcher, ImmediateDispatcher, QueueDispatcher
from .encoding import (
    JSONEncoding,
    MultipartEncoding,
    MultipartFile,
    ParameterEncoding,
    URLEncoding,
    URLEncodingDestination,
    XMLEncoding,
)
from .endpoint import Endpoint, Requestable, ResponseRequestable, build_request
from .errors import (
    NetworkError,
    NetworkErrorKind,
    RequestCancelled,
    RequestGenerationError,
    RequestGenerationErrorKind,
    TransferError,
    TransferErrorKind,
)
from .http import (
    HTTPMethod,
    HttpRequest,
    HttpResponse,
    HttpxSessionManager,
    NetworkCallable,
    NetworkSessionManager,
    StubSessionManager,
)
from .log import setup_logging
from .network import DefaultNetworkErrorLogger, DefaultNetworkService, NetworkErrorLogger, NetworkService
from .result import Result
from .runtime import NetworkingX
from .transfer import (
    DataTransferErrorLogger,
    DataTransferErrorResolver,
    DataTransferService,
    DefaultDataTransferErrorLogger,
    DefaultDataTransferErrorResolver,
    DefaultDataTransferService,
)
from .version import __version__

__all__ = [
    "ApiDataNetworkConfig",
    "AsyncioDispatcher",
    "CompletionDispatcher",
    "DataTransferErrorLogger",
    "DataTransferErrorResolver",
    "DataTransferService",
    "DefaultDataTransferErrorLogger",
    "DefaultDataTransferErrorResolver",
    "DefaultDataTransferService",
    "DefaultNetworkErrorLogger",
    "DefaultNetworkService",
    "Endpoint",
    "HTTPMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxSessionManager",
    "ImmediateDispatcher",
    "JSONEncoding",
    "JSONResponseDecoder",
    "MultipartEncoding",
    "MultipartFile",
    "NetworkCallable",
    "NetworkError",
    "NetworkErrorKind",
    "NetworkErrorLogger",
    "NetworkService",
    "NetworkSessionManager",
    "NetworkingX",
    "ParameterEncoding",
    "QueueDispatcher",
    "RawDataResponseDecoder",
    "RequestCancelled",
    "RequestGenerationError",
    "RequestGenerationErrorKind",
    "Requestable",
    "ResponseDecoder",
    "ResponseRequestable",
    "Result",
    "StubSessionManager",
    "TransferError",
    "TransferErrorKind",
    "URLEncoding",
    "URLEncodingDestination",
    "XMLEncoding",
    "XMLResponseDecoder",
    "build_request",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
