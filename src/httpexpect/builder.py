# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request builder: target resolution, passthrough request options, and ``end``."""

from __future__ import annotations

import logging
import socketserver
import ssl
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .config import ClientSettings, load_settings
from .errors import BindError, ExpectationArgumentError, RequestAlreadyEnded, categorize_exception
from .expectations import ExpectationQueue, build_expectation
from .http.client import HttpClient, create_default_http_client
from .server import EphemeralServer, listener_url
from .utils.context import bind_current_test

logger = logging.getLogger(__name__)

Callback = Callable[[BaseException | None, httpx.Response | None], Any]

_TYPE_ALIASES = {
    "json": "application/json",
    "form": "application/x-www-form-urlencoded",
    "html": "text/html",
    "text": "text/plain",
    "xml": "application/xml",
}

_FORM_TYPE = "application/x-www-form-urlencoded"


def validate_target(target: Any) -> None:
    """Reject targets that are neither a URL, an active listener, nor a WSGI callable."""
    if isinstance(target, str):
        return
    if isinstance(target, socketserver.BaseServer):
        return
    if callable(target):
        return
    raise TypeError(f"expected a URL, a listening server or a WSGI callable, got {target!r}")


class Test:
    """
    One HTTP request plus the expectations registered against its response.

    Construction resolves the target. A URL string is used as the base address, an
    active ``socketserver`` listener contributes its bound address, and a WSGI callable
    is bound to a fresh ephemeral server that is closed when the request completes.
    """

    __test__ = False  # Tell pytest this is not a test class

    def __init__(
        self,
        target: Any,
        method: str,
        path: str,
        *,
        client: HttpClient | None = None,
        settings: ClientSettings | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ):
        validate_target(target)
        self.settings = settings or load_settings()
        self.target = target
        self.method = method.upper()
        self.path = path
        self.server: EphemeralServer | None = None
        self.response: httpx.Response | None = None
        self.expectations = ExpectationQueue()

        self._client = client
        self._owns_client = client is None
        self._bind_error: BindError | None = None
        self._ended = False

        self._headers: dict[str, str] = {}
        self._params: dict[str, Any] | str | None = None
        self._json: Any = None
        self._form: dict[str, Any] | None = None
        self._content: bytes | None = None
        self._auth: tuple[str, str] | None = None
        self._timeout: float | None = None
        self._follow_redirects: bool | None = None

        self.url = self._resolve_url(ssl_context)

    def _resolve_url(self, ssl_context: ssl.SSLContext | None) -> str | None:
        if isinstance(self.target, str):
            base = self.target.rstrip("/")
        elif isinstance(self.target, socketserver.BaseServer):
            base = listener_url(self.target)
        else:
            try:
                self.server = EphemeralServer(self.target, ssl_context=ssl_context, settings=self.settings)
            except BindError as exc:
                logger.debug("binding failed for %s %s: %s", self.method, self.path, exc)
                self._bind_error = exc
                return None
            base = self.server.url
        return f"{base}{self.path}"

    # request options, forwarded to httpx unchanged

    def set(self, field: str | Mapping[str, str], value: Any = None) -> Test:
        if isinstance(field, Mapping):
            for name, item in field.items():
                self._headers[str(name)] = str(item)
        else:
            self._headers[field] = str(value)
        return self

    def type(self, content_type: str) -> Test:
        return self.set("Content-Type", _TYPE_ALIASES.get(content_type, content_type))

    def accept(self, content_type: str) -> Test:
        return self.set("Accept", _TYPE_ALIASES.get(content_type, content_type))

    def query(self, params: Mapping[str, Any] | str) -> Test:
        if isinstance(params, str) or self._params is None or isinstance(self._params, str):
            self._params = params if isinstance(params, str) else dict(params)
        else:
            self._params.update(params)
        return self

    def send(self, payload: Any) -> Test:
        """
        Attach a request body.

        Mappings merge into a JSON document, or into form fields once the content type
        is form-encoded. Strings and bytes append to a raw body. Lists replace the JSON body.
        """
        if isinstance(payload, Mapping):
            if self._content_type() == _FORM_TYPE:
                self._form = {**(self._form or {}), **payload}
            else:
                base = self._json if isinstance(self._json, dict) else {}
                self._json = {**base, **payload}
        elif isinstance(payload, (str, bytes)):
            chunk = payload.encode("utf-8") if isinstance(payload, str) else payload
            self._content = (self._content or b"") + chunk
        else:
            self._json = payload
        return self

    def auth(self, user: str, password: str = "") -> Test:
        self._auth = (user, password)
        return self

    def timeout(self, seconds: float) -> Test:
        self._timeout = seconds
        return self

    def redirects(self, follow: bool) -> Test:
        self._follow_redirects = follow
        return self

    def _content_type(self) -> str | None:
        for name, value in self._headers.items():
            if name.lower() == "content-type":
                return value.split(";", 1)[0].strip().lower()
        return None

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self._headers:
            kwargs["headers"] = dict(self._headers)
        if self._params is not None:
            kwargs["params"] = self._params
        if self._content is not None:
            kwargs["content"] = self._content
        elif self._form is not None:
            kwargs["data"] = self._form
        elif self._json is not None:
            kwargs["json"] = self._json
        if self._auth is not None:
            kwargs["auth"] = self._auth
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._follow_redirects is not None:
            kwargs["follow_redirects"] = self._follow_redirects
        return kwargs

    # expectations

    def expect(self, *args: Any) -> Any:
        """
        Register an expectation; see ``build_expectation`` for accepted shapes.

        A trailing callable after at least one other argument is treated as the
        completion callback: the expectation is registered and ``end`` runs at once.
        """
        callback: Callback | None = None
        if len(args) >= 2 and callable(args[-1]):
            *args, callback = args  # type: ignore[assignment]
        try:
            expectation = build_expectation(*args)
        except ExpectationArgumentError:
            self.close()
            raise
        self.expectations.add(expectation)
        if callback is not None:
            return self.end(callback)
        return self

    def end(self, callback: Callback | None = None) -> Any:
        """
        Dispatch the request, evaluate the expectations, then report.

        ``callback(error, response)`` receives the first failure (or ``None``) and runs
        with this builder as ``current_test()``. Without a callback the error is raised
        and the response returned. Any ephemeral server is closed afterwards on every path.
        """
        if self._ended:
            raise RequestAlreadyEnded(f"end() already called for {self.method} {self.path}")
        self._ended = True

        try:
            error, response = self._execute()
            if error is not None:
                logger.debug(
                    "%s %s failed (%s): %s",
                    self.method,
                    self.path,
                    categorize_exception(error).value,
                    error,
                )
            if callback is None:
                if error is not None:
                    raise error
                return response
            with bind_current_test(self):
                return callback(error, response)
        finally:
            self.close()

    def _execute(self) -> tuple[BaseException | None, httpx.Response | None]:
        if self._bind_error is not None:
            return self._bind_error, None

        client = self._client
        if client is None:
            client = self._client = create_default_http_client(self.settings)

        logger.debug("dispatching %s %s", self.method, self.url)
        try:
            response = client.request(self.method, self.url, **self._request_kwargs())
        except httpx.HTTPError as exc:
            return exc, None

        self.response = response
        return self.expectations.run(response), response

    def close(self) -> None:
        """Release the ephemeral server and, when owned, the HTTP client."""
        if self.server is not None:
            self.server.close()
        if self._owns_client and self._client is not None:
            self._client.close()

    def __repr__(self) -> str:
        return f"<Test {self.method} {self.url or self.path}>"


class RequestFactory:
    """HTTP method selectors bound to one target; each call returns a new ``Test``."""

    def __init__(
        self,
        target: Any,
        *,
        settings: ClientSettings | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ):
        validate_target(target)
        self.target = target
        self.settings = settings
        self.ssl_context = ssl_context

    def _test(self, method: str, path: str) -> Test:
        return Test(self.target, method, path, settings=self.settings, ssl_context=self.ssl_context)

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


def request(
    target: Any,
    *,
    settings: ClientSettings | None = None,
    ssl_context: ssl.SSLContext | None = None,
) -> RequestFactory:
    """Entry point: ``request(app).get("/").expect(200).end()``."""
    return RequestFactory(target, settings=settings, ssl_context=ssl_context)


__all__ = ["Callback", "RequestFactory", "Test", "request", "validate_target"]
