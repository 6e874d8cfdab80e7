# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum
from typing import Any


class HttpExpectError(Exception):
    """Base class for errors raised by httpexpect itself."""


class ExpectationError(HttpExpectError, AssertionError):
    """A registered expectation did not hold for the response."""

    def __init__(self, message: str, *, expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.message = message
        self.expected = expected
        self.actual = actual


class ExpectationArgumentError(HttpExpectError, TypeError):
    """``expect()`` was called with an argument combination it does not understand."""


class BindError(HttpExpectError, OSError):
    """The ephemeral listener for a request handler could not be started."""


class RequestAlreadyEnded(HttpExpectError, RuntimeError):
    """``end()`` was called more than once on the same request."""


class ErrorCategory(str, Enum):
    TRANSPORT = "TRANSPORT"
    TIMEOUT = "TIMEOUT"
    BINDING = "BINDING"
    EXPECTATION = "EXPECTATION"
    UNKNOWN = "UNKNOWN"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map the error delivered to a completion callback to an ErrorCategory.
    """
    import httpx

    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, BindError):
        return ErrorCategory.BINDING

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.TransportError, ConnectionError)):
        return ErrorCategory.TRANSPORT

    # Predicates may raise plain AssertionError from ``assert`` statements.
    if isinstance(exc, AssertionError):
        return ErrorCategory.EXPECTATION

    return ErrorCategory.UNKNOWN


__all__ = [
    "BindError",
    "ErrorCategory",
    "ExpectationArgumentError",
    "ExpectationError",
    "HttpExpectError",
    "RequestAlreadyEnded",
    "categorize_exception",
]
