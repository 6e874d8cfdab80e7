# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Ambient "current test" context.

Completion callbacks receive ``(error, response)``; the request builder that produced
them is made available through a ContextVar for the duration of the callback, so
assertions chained inside the callback can reach it without an extra argument.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..builder import Test

_current_test: ContextVar["Test | None"] = ContextVar("httpexpect_current_test", default=None)


def current_test() -> "Test | None":
    """Return the builder whose completion callback is running, if any."""
    return _current_test.get()


@contextmanager
def bind_current_test(test: "Test") -> Iterator["Test"]:
    """Expose ``test`` as the current test for the duration of the block."""
    token = _current_test.set(test)
    try:
        yield test
    finally:
        _current_test.reset(token)


__all__ = ["bind_current_test", "current_test"]
