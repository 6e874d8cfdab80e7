# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cookie-persisting request factory backed by one long-lived httpx client."""

from __future__ import annotations

import ssl
import threading
from contextlib import suppress
from typing import Any

import httpx

from .builder import Test, validate_target
from .config import ClientSettings, load_settings
from .http.client import HttpClient, create_default_http_client


class _SerializedClient:
    """Wraps the shared client so each request/response pair holds the agent lock."""

    def __init__(self, client: HttpClient, lock: threading.Lock):
        self._client = client
        self._lock = lock

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        with self._lock:
            return self._client.request(method, url, **kwargs)

    def close(self) -> None:
        # The agent owns the underlying client.
        return None


class Agent:
    """
    Request factory whose requests share one session.

    Cookies set by one response are sent on later requests made through the same agent;
    the cookie handling itself is httpx's. Every method selector returns a new ``Test``.
    """

    def __init__(
        self,
        target: Any,
        *,
        settings: ClientSettings | None = None,
        ssl_context: ssl.SSLContext | None = None,
        http_client: HttpClient | None = None,
    ):
        validate_target(target)
        self.target = target
        self.settings = settings or load_settings()
        self.ssl_context = ssl_context
        self.http_client = http_client or create_default_http_client(self.settings)
        self._lock = threading.Lock()
        self._session = _SerializedClient(self.http_client, self._lock)

    @property
    def cookies(self) -> httpx.Cookies:
        return self.http_client.cookies

    def _test(self, method: str, path: str) -> Test:
        return Test(
            self.target,
            method,
            path,
            client=self._session,
            settings=self.settings,
            ssl_context=self.ssl_context,
        )

    def get(self, path: str) -> Test:
        return self._test("GET", path)

    def post(self, path: str) -> Test:
        return self._test("POST", path)

    def put(self, path: str) -> Test:
        return self._test("PUT", path)

    def patch(self, path: str) -> Test:
        return self._test("PATCH", path)

    def delete(self, path: str) -> Test:
        return self._test("DELETE", path)

    del_ = delete

    def head(self, path: str) -> Test:
        return self._test("HEAD", path)

    def options(self, path: str) -> Test:
        return self._test("OPTIONS", path)

    def close(self) -> None:
        with suppress(Exception):
            self.http_client.close()

    def __enter__(self) -> Agent:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


def agent(
    target: Any,
    *,
    settings: ClientSettings | None = None,
    ssl_context: ssl.SSLContext | None = None,
) -> Agent:
    """Create an ``Agent`` for ``target`` (URL, listening server, or WSGI callable)."""
    return Agent(target, settings=settings, ssl_context=ssl_context)


__all__ = ["Agent", "agent"]
