# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Ephemeral listeners for unbound WSGI handlers, and base URLs for active ones."""

from __future__ import annotations

import logging
import socket
import socketserver
import ssl
import threading
from collections.abc import Callable
from typing import Any
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from .config import ClientSettings, load_settings
from .errors import BindError

logger = logging.getLogger(__name__)

WSGIApp = Callable[..., Any]


class _LoggingRequestHandler(WSGIRequestHandler):
    """Send wsgiref access lines to the module logger instead of stderr."""

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002 - base signature
        logger.debug("%s - %s", self.address_string(), format % args)


class _ThreadingWSGIServer(socketserver.ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _ThreadingWSGIServerV6(_ThreadingWSGIServer):
    address_family = socket.AF_INET6


def _format_host(host: str) -> str:
    if host in ("", "0.0.0.0"):
        return "127.0.0.1"
    if host == "::":
        host = "::1"
    if ":" in host:
        return f"[{host}]"
    return host


def listener_url(server: socketserver.BaseServer) -> str:
    """Return the base URL of an already listening ``socketserver`` instance."""
    address = server.server_address
    if not isinstance(address, tuple):
        raise TypeError(f"cannot build a URL for a listener bound to {address!r}")
    host, port = address[:2]
    if isinstance(host, bytes):
        host = host.decode("ascii")
    scheme = "https" if isinstance(getattr(server, "socket", None), ssl.SSLSocket) else "http"
    return f"{scheme}://{_format_host(str(host))}:{port}"


class EphemeralServer:
    """
    A WSGI handler bound to an OS-assigned local port for the lifetime of one request.

    The listener is started on construction, so ``url`` is known before anything is
    dispatched. ``close()`` releases it; repeated calls are no-ops and close listeners
    fire once.
    """

    def __init__(
        self,
        app: WSGIApp,
        *,
        host: str | None = None,
        ssl_context: ssl.SSLContext | None = None,
        settings: ClientSettings | None = None,
    ):
        self.settings = settings or load_settings()
        self.app = app
        bind_host = host or self.settings.bind_host
        server_class = _ThreadingWSGIServerV6 if ":" in bind_host else _ThreadingWSGIServer

        try:
            self._server = make_server(
                bind_host,
                0,
                app,
                server_class=server_class,
                handler_class=_LoggingRequestHandler,
            )
        except OSError as exc:
            raise BindError(f"could not bind ephemeral server on {bind_host}: {exc}") from exc

        if ssl_context is not None:
            try:
                self._server.socket = ssl_context.wrap_socket(self._server.socket, server_side=True)
            except OSError as exc:
                self._server.server_close()
                raise BindError(f"could not enable TLS on ephemeral server: {exc}") from exc

        self.url = listener_url(self._server)
        self._lock = threading.Lock()
        self._closed = False
        self._close_listeners: list[Callable[[], object]] = []
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            kwargs={"poll_interval": self.settings.poll_interval},
            name=f"httpexpect-server-{self.port}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("bound ephemeral server at %s", self.url)

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    @property
    def port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, callback: Callable[[], object]) -> None:
        """Register a close notification; runs immediately if already closed."""
        with self._lock:
            if not self._closed:
                self._close_listeners.append(callback)
                return
        callback()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            listeners, self._close_listeners = self._close_listeners, []

        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=max(1.0, self.settings.poll_interval * 10))
        logger.debug("closed ephemeral server at %s", self.url)

        for callback in listeners:
            callback()

    def __enter__(self) -> EphemeralServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<EphemeralServer {self.url} {state}>"


__all__ = ["EphemeralServer", "WSGIApp", "listener_url"]
