# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import concurrent.futures
import dataclasses
import logging
import socket

import httpx
import pytest

from networkingx import config
from networkingx.config import DEFAULT_USER_AGENT, ApiDataNetworkConfig
from networkingx.errors import (
    NetworkError,
    NetworkErrorKind,
    RequestCancelled,
    TransferError,
    TransferErrorKind,
    categorize_exception,
)
from networkingx.log import resolve_level
from networkingx.result import Result


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("NETWORKINGX_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("NETWORKINGX_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("NETWORKINGX_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("NETWORKINGX_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("NETWORKINGX_HTTP_CHUNK_SIZE", "1024")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.allow_redirects is False
    assert settings.verify_ssl is False
    assert settings.chunk_size == 1024


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("NETWORKINGX_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("NETWORKINGX_HTTP_CHUNK_SIZE", "-5")
    monkeypatch.delenv("NETWORKINGX_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.timeout == config.HttpSettings.timeout
    assert settings.chunk_size == config.HttpSettings.chunk_size
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_load_http_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("NETWORKINGX_HTTP_TIMEOUT", "7.7")
    assert config.load_http_settings().timeout == 7.7
    monkeypatch.setenv("NETWORKINGX_HTTP_TIMEOUT", "8.8")
    assert config.load_http_settings().timeout == 8.8


def test_api_config_is_immutable_and_detached_from_inputs():
    headers = {"Accept": "application/json"}
    cfg = ApiDataNetworkConfig(base_url="https://api.example.com", headers=headers, query_parameters={"lang": "en"})
    headers["Accept"] = "text/html"

    assert cfg.headers["Accept"] == "application/json"
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.base_url = "https://other.example.com"  # type: ignore[misc]
    with pytest.raises(TypeError):
        cfg.query_parameters["lang"] = "de"  # type: ignore[index]


def test_resolve_level_falls_back_to_warning():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("nonsense") == logging.WARNING
    assert resolve_level("basic_format") == logging.WARNING


@pytest.mark.parametrize(
    ("cause", "kind"),
    [
        (httpx.ReadTimeout("slow"), NetworkErrorKind.TIMED_OUT),
        (TimeoutError("slow"), NetworkErrorKind.TIMED_OUT),
        (httpx.ConnectError("refused"), NetworkErrorKind.NOT_CONNECTED),
        (socket.gaierror("no such host"), NetworkErrorKind.NOT_CONNECTED),
        (ConnectionRefusedError("refused"), NetworkErrorKind.NOT_CONNECTED),
        (ConnectionResetError("reset"), NetworkErrorKind.TRANSPORT_FAILURE),
        (httpx.ReadError("dropped"), NetworkErrorKind.TRANSPORT_FAILURE),
        (httpx.WriteError("dropped"), NetworkErrorKind.TRANSPORT_FAILURE),
        (RequestCancelled("stop"), NetworkErrorKind.CANCELLED),
        (concurrent.futures.CancelledError(), NetworkErrorKind.CANCELLED),
        ("gateway said no", NetworkErrorKind.MESSAGE),
        (ValueError("weird"), NetworkErrorKind.TRANSPORT_FAILURE),
    ],
)
def test_categorize_exception(cause, kind):
    error = categorize_exception(cause)
    assert error.kind is kind


def test_categorize_exception_preserves_cause():
    cause = RuntimeError("boom")
    error = categorize_exception(cause)
    assert error.cause is cause
    assert "RuntimeError" in str(error)
    assert categorize_exception("gateway said no").message == "gateway said no"


def test_network_error_status_helpers():
    not_found = NetworkError.http_status(404, b"missing")
    assert not_found.is_not_found_error
    assert not_found.has_status_code(404)
    assert not not_found.has_status_code(500)
    assert not NetworkError.unacceptable_status_code(404).is_not_found_error
    assert not NetworkError.timed_out().is_not_found_error
    assert NetworkError.http_status(404, b"x") == NetworkError.http_status(404, b"x")
    assert NetworkError.http_status(404, b"x") != NetworkError.http_status(404, b"y")


def test_transfer_error_exposes_network_error():
    inner = NetworkError.not_connected()
    wrapped = TransferError.network(inner)
    assert wrapped.kind is TransferErrorKind.NETWORK
    assert wrapped.network_error is inner
    assert TransferError.no_response_body().network_error is None


def test_result_unwrap():
    assert Result.success(3).unwrap() == 3
    assert Result.success().ok
    failure = Result.failure(TransferError.no_response_body())
    assert not failure.ok
    with pytest.raises(TransferError):
        failure.unwrap()
