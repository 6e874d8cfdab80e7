# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpexpect package entrypoint.

Fluent HTTP assertions for tests. ``request(target)`` accepts a URL, an already listening
server, or a WSGI callable (bound to an ephemeral local port per request), and returns a
factory whose method selectors build requests with chainable expectations::

    request(app).get("/").expect(200).expect("Content-Type", re.compile("json")).end()

``agent(target)`` does the same while persisting cookies across requests.
"""

from .agent import Agent, agent
from .builder import RequestFactory, Test, request
from .config import ClientSettings, load_settings
from .errors import (
    BindError,
    ErrorCategory,
    ExpectationArgumentError,
    ExpectationError,
    HttpExpectError,
    RequestAlreadyEnded,
    categorize_exception,
)
from .log import setup_logging
from .server import EphemeralServer, listener_url
from .utils.context import current_test
from .version import __version__

__all__ = [
    "Agent",
    "BindError",
    "ClientSettings",
    "EphemeralServer",
    "ErrorCategory",
    "ExpectationArgumentError",
    "ExpectationError",
    "HttpExpectError",
    "RequestAlreadyEnded",
    "RequestFactory",
    "Test",
    "__version__",
    "agent",
    "categorize_exception",
    "current_test",
    "listener_url",
    "load_settings",
    "request",
    "setup_logging",
]
