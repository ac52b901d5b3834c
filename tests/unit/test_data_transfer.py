# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import json
import threading
from dataclasses import dataclass
from typing import Any

from networkingx.config import ApiDataNetworkConfig
from networkingx.decoding import RawDataResponseDecoder
from networkingx.dispatch import AsyncioDispatcher, QueueDispatcher
from networkingx.endpoint import Endpoint
from networkingx.errors import NetworkError, NetworkErrorKind, TransferErrorKind
from networkingx.http.models import HttpResponse
from networkingx.http.transport import StubSessionManager
from networkingx.network import DefaultNetworkService
from networkingx.transfer import DefaultDataTransferService

CONFIG = ApiDataNetworkConfig(base_url="https://api.example.com")
URL = "https://api.example.com/users/1"


@dataclass
class User:
    id: int
    name: str


class AuthResolver:
    def resolve(self, error: NetworkError) -> BaseException:
        if error.has_status_code(401):
            return PermissionError("login required")
        return error


class RecordingErrorLogger:
    def __init__(self):
        self.errors = []

    def log_error(self, error):
        self.errors.append(error)


def _service(outcome=None, *, session=None, **kwargs):
    session = session or StubSessionManager({URL: outcome})
    return DefaultDataTransferService(DefaultNetworkService(CONFIG, session), **kwargs)


def _fetch(service, endpoint):
    results = []
    service.request(endpoint, results.append)
    assert len(results) == 1
    return results[0]


def test_decodes_json_into_response_type():
    service = _service((b'{"id": 1, "name": "Ada"}', HttpResponse(200), None))
    result = _fetch(service, Endpoint(path="users/1", response_type=User))
    assert result.ok
    assert result.value == User(id=1, name="Ada")


def test_not_found_surfaces_as_network_failure():
    result = _fetch(_service((b"nope", HttpResponse(404), None)), Endpoint(path="users/1", response_type=User))
    assert result.error.kind is TransferErrorKind.NETWORK
    assert result.error.network_error.is_not_found_error


def test_missing_body_for_typed_endpoint():
    result = _fetch(_service((None, HttpResponse(200), None)), Endpoint(path="users/1", response_type=User))
    assert result.error.kind is TransferErrorKind.NO_RESPONSE_BODY


def test_void_endpoint_ignores_body():
    for data in (None, b"not json"):
        result = _fetch(_service((data, HttpResponse(204), None)), Endpoint(path="users/1", method="DELETE", response_type=None))
        assert result.ok
        assert result.value is None


def test_decoding_failure_wraps_cause_and_logs():
    logger = RecordingErrorLogger()
    service = _service((b"<html>", HttpResponse(200), None), error_logger=logger)
    result = _fetch(service, Endpoint(path="users/1", response_type=User))
    assert result.error.kind is TransferErrorKind.DECODING_FAILED
    assert isinstance(result.error.cause, json.JSONDecodeError)
    assert logger.errors == [result.error.cause]


def test_schema_mismatch_is_decoding_failure():
    result = _fetch(_service((b'{"id": "x"}', HttpResponse(200), None)), Endpoint(path="users/1", response_type=User))
    assert result.error.kind is TransferErrorKind.DECODING_FAILED


def test_raw_decoder_requires_bytes_response_type():
    service = _service((b"\x00\x01", HttpResponse(200), None))
    raw = _fetch(service, Endpoint(path="users/1", response_decoder=RawDataResponseDecoder(), response_type=bytes))
    assert raw.value == b"\x00\x01"

    mismatch = _fetch(service, Endpoint(path="users/1", response_decoder=RawDataResponseDecoder(), response_type=dict))
    assert mismatch.error.kind is TransferErrorKind.DECODING_FAILED
    assert isinstance(mismatch.error.cause, TypeError)


def test_resolver_substitutes_application_errors():
    service = _service((b"denied", HttpResponse(401), None), error_resolver=AuthResolver())
    result = _fetch(service, Endpoint(path="users/1"))
    assert result.error.kind is TransferErrorKind.RESOLVED_FAILURE
    assert isinstance(result.error.cause, PermissionError)

    passthrough = _fetch(_service((b"boom", HttpResponse(500), None), error_resolver=AuthResolver()), Endpoint(path="users/1"))
    assert passthrough.error.kind is TransferErrorKind.NETWORK
    assert passthrough.error.network_error.status_code == 500


def test_url_generation_failure_reaches_completion():
    service = DefaultDataTransferService(DefaultNetworkService(ApiDataNetworkConfig(base_url=""), StubSessionManager()))
    results = []
    assert service.request(Endpoint(path="users"), results.append) is None
    assert results[0].error.network_error.kind is NetworkErrorKind.URL_GENERATION_FAILED


def test_queue_dispatcher_delivers_in_arrival_order_on_primary_thread():
    session = StubSessionManager(
        {
            URL: (b'{"id": 1, "name": "a"}', HttpResponse(200), None),
            "https://api.example.com/users/2": (b'{"id": 2, "name": "b"}', HttpResponse(200), None),
        },
        deferred=True,
    )
    dispatcher = QueueDispatcher()
    service = _service(session=session, dispatcher=dispatcher)
    delivered = []
    service.request(Endpoint(path="users/2", response_type=User), lambda r: delivered.append(r.value.id))
    service.request(Endpoint(path="users/1", response_type=User), lambda r: delivered.append(r.value.id))

    worker = threading.Thread(target=session.flush)
    worker.start()
    worker.join()

    assert delivered == []
    assert len(dispatcher) == 2
    assert dispatcher.run_pending() == 2
    assert delivered == [2, 1]


def test_asyncio_dispatcher_redelivers_onto_loop_thread():
    session = StubSessionManager({URL: (b'{"id": 1, "name": "a"}', HttpResponse(200), None)}, deferred=True)

    async def scenario():
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        service = _service(session=session, dispatcher=AsyncioDispatcher())
        service.request(
            Endpoint(path="users/1", response_type=User),
            lambda result: future.set_result((threading.get_ident(), result)),
        )
        worker = threading.Thread(target=session.flush)
        worker.start()
        thread_id, result = await asyncio.wait_for(future, timeout=5)
        worker.join()
        return thread_id, result

    thread_id, result = asyncio.run(scenario())
    assert thread_id == threading.get_ident()
    assert result.value == User(id=1, name="a")


def test_cancelled_task_reports_cancelled():
    session = StubSessionManager({URL: (b"{}", HttpResponse(200), None)}, deferred=True)
    service = _service(session=session)
    results = []
    handle = service.request(Endpoint(path="users/1", response_type=dict[str, Any]), results.append)
    handle.cancel()
    session.flush()
    assert len(results) == 1
    assert results[0].error.network_error.kind is NetworkErrorKind.CANCELLED
