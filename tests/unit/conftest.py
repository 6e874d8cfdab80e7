# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import ssl
import threading
from pathlib import Path
from wsgiref.simple_server import WSGIRequestHandler, make_server

import pytest


FIXTURES = Path(__file__).parent / "fixtures"


def _text_app(body="hey", status="200 OK", content_type="text/html; charset=utf-8", headers=None):
    payload = body.encode("utf-8") if isinstance(body, str) else body

    def app(environ, start_response):  # noqa: ARG001
        response_headers = [("Content-Type", content_type), ("Content-Length", str(len(payload)))]
        response_headers.extend(headers or [])
        start_response(status, response_headers)
        return [payload]

    return app


def _json_app(document, status="200 OK"):
    return _text_app(
        json.dumps(document, separators=(",", ":")),
        status=status,
        content_type="application/json; charset=utf-8",
    )


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format, *args):  # noqa: A002 - base signature
        return


@pytest.fixture()
def text_app():
    return _text_app


@pytest.fixture()
def json_app():
    return _json_app


@pytest.fixture()
def live_server():
    """A wsgiref server already listening before the test touches it."""
    server = make_server("127.0.0.1", 0, _text_app("hey"), handler_class=_QuietHandler)
    thread = threading.Thread(target=server.serve_forever, kwargs={"poll_interval": 0.05})
    thread.daemon = True
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture()
def tls_context():
    """Server-side context over the self-signed localhost pair in ``fixtures/``."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(FIXTURES / "test_cert.pem", FIXTURES / "test_key.pem")
    return context
