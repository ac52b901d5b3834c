# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import httpx
import pytest

from networkingx.config import ApiDataNetworkConfig
from networkingx.endpoint import Endpoint
from networkingx.errors import NetworkErrorKind, RequestCancelled, RequestGenerationError
from networkingx.http.models import HttpResponse
from networkingx.http.transport import StubSessionManager
from networkingx.network import DefaultNetworkErrorLogger, DefaultNetworkService

CONFIG = ApiDataNetworkConfig(base_url="https://api.example.com")
URL = "https://api.example.com/users/1"
ENDPOINT = Endpoint(path="users/1")


class RecordingLogger:
    def __init__(self):
        self.events = []

    def log_request(self, request):
        self.events.append(("request", request.url))

    def log_response(self, data, response):
        self.events.append(("response", data, response.status_code if response else None))

    def log_error(self, error):
        self.events.append(("error", error))


class ExplodingLogger:
    def log_request(self, request):  # noqa: ARG002
        raise RuntimeError("logger down")

    def log_response(self, data, response):  # noqa: ARG002
        raise RuntimeError("logger down")

    def log_error(self, error):  # noqa: ARG002
        raise RuntimeError("logger down")


def _run(outcome, *, session=None, logger=None, endpoint=ENDPOINT):
    session = session or StubSessionManager({URL: outcome})
    service = DefaultNetworkService(CONFIG, session, logger or RecordingLogger())
    results = []
    service.request(endpoint, results.append)
    assert len(results) == 1
    return results[0]


def test_acceptable_status_returns_data():
    result = _run((b'{"id":1}', HttpResponse(200), None))
    assert result.ok
    assert result.value == b'{"id":1}'


def test_acceptable_status_wins_over_reported_error():
    result = _run((b"", HttpResponse(204), RuntimeError("stale")))
    assert result.ok
    assert result.value == b""


def test_unacceptable_status_with_body_is_http_status():
    result = _run((b"missing", HttpResponse(404), None))
    assert result.error.kind is NetworkErrorKind.HTTP_STATUS
    assert result.error.status_code == 404
    assert result.error.data == b"missing"
    assert result.error.is_not_found_error


def test_unacceptable_status_without_body_classifies_cause():
    result = _run((None, HttpResponse(500), httpx.ReadTimeout("slow")))
    assert result.error.kind is NetworkErrorKind.TIMED_OUT


def test_unacceptable_status_without_body_or_cause():
    result = _run((None, HttpResponse(503), None))
    assert result.error.kind is NetworkErrorKind.UNACCEPTABLE_STATUS_CODE
    assert result.error.status_code == 503


@pytest.mark.parametrize(
    ("cause", "kind"),
    [
        (httpx.ConnectError("down"), NetworkErrorKind.NOT_CONNECTED),
        (RequestCancelled("stop"), NetworkErrorKind.CANCELLED),
        (RuntimeError("boom"), NetworkErrorKind.TRANSPORT_FAILURE),
        ("proxy said no", NetworkErrorKind.MESSAGE),
    ],
)
def test_missing_response_classifies_cause(cause, kind):
    result = _run((None, None, cause))
    assert result.error.kind is kind


def test_missing_response_and_cause_is_success_without_data():
    result = _run((None, None, None))
    assert result.ok
    assert result.value is None


def test_custom_acceptable_status_codes():
    session = StubSessionManager({URL: (b"gone", HttpResponse(404), None)}, acceptable_status_codes={200, 404})
    assert _run(None, session=session).ok


def test_url_generation_failure_is_delivered_synchronously_without_transport_call():
    session = StubSessionManager()
    logger = RecordingLogger()
    service = DefaultNetworkService(ApiDataNetworkConfig(base_url="not a url"), session, logger)
    results = []

    handle = service.request(ENDPOINT, results.append)

    assert handle is None
    assert session.requests == []
    assert results[0].error.kind is NetworkErrorKind.URL_GENERATION_FAILED
    assert isinstance(results[0].error.cause, RequestGenerationError)
    assert logger.events == [("error", results[0].error)]


def test_logger_sees_request_then_response():
    logger = RecordingLogger()
    _run((b"{}", HttpResponse(200), None), logger=logger)
    assert logger.events == [("request", URL), ("response", b"{}", 200)]


def test_failing_logger_does_not_affect_pipeline():
    assert _run((b"{}", HttpResponse(200), None), logger=ExplodingLogger()).ok
    assert _run((None, HttpResponse(500), None), logger=ExplodingLogger()).error.status_code == 500


def test_default_logger_writes_debug_records(caplog):
    session = StubSessionManager({URL: (b'{"id": 1}', HttpResponse(200, url=URL), None)})
    service = DefaultNetworkService(CONFIG, session, DefaultNetworkErrorLogger())
    with caplog.at_level(logging.DEBUG, logger="networkingx.network"):
        service.request(Endpoint(path="users/1", method="POST", body_parameters={"a": 1}), lambda _: None)
    messages = [record.getMessage() for record in caplog.records]
    assert f"request: POST {URL}" in messages
    assert "body: {'a': 1}" in messages
    assert "responseData: {'id': 1}" in messages
