# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import httpx

from httpexpect import config, log
from httpexpect.config import DEFAULT_USER_AGENT, ClientSettings
from httpexpect.errors import (
    BindError,
    ErrorCategory,
    ExpectationError,
    categorize_exception,
)
from httpexpect.version import __version__


def test_client_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("HTTPEXPECT_TIMEOUT", "5.5")
    monkeypatch.setenv("HTTPEXPECT_FOLLOW_REDIRECTS", "yes")
    monkeypatch.setenv("HTTPEXPECT_VERIFY_SSL", "0")
    monkeypatch.setenv("HTTPEXPECT_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("HTTPEXPECT_BIND_HOST", "::1")
    monkeypatch.setenv("HTTPEXPECT_POLL_INTERVAL", "0.2")

    settings = config.load_settings()

    assert settings.timeout == 5.5
    assert settings.follow_redirects is True
    assert settings.verify_ssl is False
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.bind_host == "::1"
    assert settings.poll_interval == 0.2


def test_client_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("HTTPEXPECT_TIMEOUT", "not-a-number")
    monkeypatch.setenv("HTTPEXPECT_POLL_INTERVAL", "-1")
    monkeypatch.setenv("HTTPEXPECT_BIND_HOST", "")

    settings = config.load_settings()

    assert settings.timeout == ClientSettings.timeout
    assert settings.poll_interval == ClientSettings.poll_interval
    assert settings.bind_host == ClientSettings.bind_host


def test_client_settings_defaults(monkeypatch):
    for name in ("HTTPEXPECT_FOLLOW_REDIRECTS", "HTTPEXPECT_VERIFY_SSL", "HTTPEXPECT_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    settings = config.load_settings()
    assert settings.follow_redirects is False
    assert settings.verify_ssl is True
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert __version__ in DEFAULT_USER_AGENT


def test_load_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("HTTPEXPECT_TIMEOUT", "7.7")
    assert config.load_settings().timeout == 7.7
    monkeypatch.setenv("HTTPEXPECT_TIMEOUT", "8.8")
    assert config.load_settings().timeout == 8.8


def test_categorize_exception():
    request = httpx.Request("GET", "http://example")
    assert categorize_exception(None) is ErrorCategory.NONE
    assert categorize_exception(BindError("no port")) is ErrorCategory.BINDING
    assert categorize_exception(httpx.ReadTimeout("slow", request=request)) is ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused", request=request)) is ErrorCategory.TRANSPORT
    assert categorize_exception(ConnectionResetError()) is ErrorCategory.TRANSPORT
    assert categorize_exception(ExpectationError("nope")) is ErrorCategory.EXPECTATION
    assert categorize_exception(AssertionError("plain")) is ErrorCategory.EXPECTATION
    assert categorize_exception(ValueError("other")) is ErrorCategory.UNKNOWN


def test_expectation_error_carries_details():
    error = ExpectationError("expected 1, got 2", expected=1, actual=2)
    assert isinstance(error, AssertionError)
    assert error.message == "expected 1, got 2"
    assert (error.expected, error.actual) == (1, 2)


def test_setup_logging_uses_requested_level(monkeypatch):
    captured = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    log.setup_logging("debug")
    assert captured["level"] == logging.DEBUG
    log.setup_logging("bogus")
    assert captured["level"] == logging.WARNING
