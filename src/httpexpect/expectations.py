# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Expectation descriptors and the ordered queue that evaluates them.

Every descriptor exposes ``check(response)``, returning ``None`` when it holds and the
exception to report otherwise. ``build_expectation`` maps the argument shapes accepted by
``Test.expect`` onto exactly one descriptor kind.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

import httpx

from .errors import ExpectationArgumentError, ExpectationError
from .http.body import parsed_body
from .http.headers import header_value

logger = logging.getLogger(__name__)

Pattern = re.Pattern
Predicate = Callable[[httpx.Response], Any]

STRUCTURAL_TYPES = (Mapping, list, bool, float)

_FLAG_LETTERS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


def describe_pattern(pattern: Pattern) -> str:
    """Render a compiled pattern as ``/source/flags`` for failure messages."""
    flags = "".join(letter for flag, letter in _FLAG_LETTERS if pattern.flags & flag)
    return f"/{pattern.pattern}/{flags}"


def reason_phrase(status: int) -> str:
    return httpx.codes.get_reason_phrase(status)


def _is_status(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class StatusExpectation:
    status: int

    def check(self, response: httpx.Response) -> BaseException | None:
        actual = response.status_code
        if actual == self.status:
            return None
        return ExpectationError(
            f'expected {self.status} "{reason_phrase(self.status)}", got {actual} "{reason_phrase(actual)}"',
            expected=self.status,
            actual=actual,
        )


@dataclass(frozen=True)
class TextBodyExpectation:
    """Exact match against the raw text body.

    A string that is itself JSON also passes when it decodes to the parsed body, so
    ``'{"a": 1}'`` matches a compact ``{"a":1}`` response.
    """

    text: str

    def check(self, response: httpx.Response) -> BaseException | None:
        actual = response.text
        if actual == self.text:
            return None
        if self._matches_structurally(response):
            return None
        return ExpectationError(
            f"expected '{self.text}' response body, got '{actual}'",
            expected=self.text,
            actual=actual,
        )

    def _matches_structurally(self, response: httpx.Response) -> bool:
        try:
            decoded = json.loads(self.text)
        except ValueError:
            return False
        if not isinstance(decoded, (dict, list)):
            return False
        return decoded == parsed_body(response)


@dataclass(frozen=True)
class PatternBodyExpectation:
    pattern: Pattern

    def check(self, response: httpx.Response) -> BaseException | None:
        actual = response.text
        if self.pattern.search(actual):
            return None
        return ExpectationError(
            f"expected body '{actual}' to match {describe_pattern(self.pattern)}",
            expected=self.pattern,
            actual=actual,
        )


@dataclass(frozen=True)
class StructuredBodyExpectation:
    """Deep equality against the parsed JSON body."""

    value: Any

    def check(self, response: httpx.Response) -> BaseException | None:
        actual = parsed_body(response)
        if _deep_equal(self.value, actual):
            return None
        return ExpectationError(
            f"expected {self.value!r} response body, got {actual!r}",
            expected=self.value,
            actual=actual,
        )


def _deep_equal(expected: Any, actual: Any) -> bool:
    # bool is an int subclass; True must not equal 1 in a JSON document.
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(expected, bool) and isinstance(actual, bool) and expected == actual
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping) or set(expected) != set(actual):
            return False
        return all(_deep_equal(expected[key], actual[key]) for key in expected)
    if isinstance(expected, (list, tuple)):
        if not isinstance(actual, list) or len(expected) != len(actual):
            return False
        return all(_deep_equal(e, a) for e, a in zip(expected, actual))
    return expected == actual


BodyExpectation = Union[TextBodyExpectation, PatternBodyExpectation, StructuredBodyExpectation]


def body_expectation(value: Any) -> BodyExpectation:
    """Pick the BodyMatcher for ``value``: text, pattern, or structural."""
    if isinstance(value, str):
        return TextBodyExpectation(value)
    if isinstance(value, Pattern):
        return PatternBodyExpectation(value)
    if isinstance(value, STRUCTURAL_TYPES):
        return StructuredBodyExpectation(value)
    raise ExpectationArgumentError(f"unsupported body expectation: {value!r}")


@dataclass(frozen=True)
class StatusBodyExpectation:
    """Status and body registered together; the body is checked first."""

    status: StatusExpectation
    body: BodyExpectation

    def check(self, response: httpx.Response) -> BaseException | None:
        error = self.body.check(response)
        if error is not None:
            return error
        return self.status.check(response)


@dataclass(frozen=True)
class HeaderExpectation:
    field: str
    value: str | Pattern

    def check(self, response: httpx.Response) -> BaseException | None:
        actual = header_value(response.headers, self.field)
        if actual is None:
            return ExpectationError(f'expected "{self.field}" header field', expected=self.value)
        if isinstance(self.value, Pattern):
            if self.value.search(actual):
                return None
            return ExpectationError(
                f'expected "{self.field}" matching {describe_pattern(self.value)}, got "{actual}"',
                expected=self.value,
                actual=actual,
            )
        if actual == self.value:
            return None
        return ExpectationError(
            f'expected "{self.field}" of "{self.value}", got "{actual}"',
            expected=self.value,
            actual=actual,
        )


@dataclass(frozen=True)
class PredicateExpectation:
    """Arbitrary callable; raising or returning something truthy is a failure."""

    predicate: Predicate

    def check(self, response: httpx.Response) -> BaseException | None:
        try:
            result = self.predicate(response)
        except Exception as exc:  # noqa: BLE001 - the raised error is the failure
            return exc
        if not result:
            return None
        if isinstance(result, BaseException):
            return result
        return ExpectationError(str(result), actual=result)


Expectation = Union[
    StatusExpectation,
    TextBodyExpectation,
    PatternBodyExpectation,
    StructuredBodyExpectation,
    StatusBodyExpectation,
    HeaderExpectation,
    PredicateExpectation,
]


def header_expectation(name: str, value: Any) -> HeaderExpectation:
    if _is_status(value):
        value = str(value)
    if not isinstance(value, (str, Pattern)):
        raise ExpectationArgumentError(f"unsupported matcher for header {name!r}: {value!r}")
    return HeaderExpectation(name, value)


def build_expectation(*args: Any) -> Expectation:
    """
    Map an ``expect()`` argument list (without a trailing callback) to a descriptor.

    - ``(predicate)``          -> PredicateExpectation
    - ``(status)``             -> StatusExpectation
    - ``(status, body)``       -> StatusBodyExpectation
    - ``(body)``               -> text / pattern / structured body expectation
    - ``(field, value)``       -> HeaderExpectation
    """
    if len(args) == 1:
        (value,) = args
        if _is_status(value):
            return StatusExpectation(value)
        if callable(value):
            return PredicateExpectation(value)
        return body_expectation(value)

    if len(args) == 2:
        first, second = args
        if _is_status(first):
            return StatusBodyExpectation(StatusExpectation(first), body_expectation(second))
        if isinstance(first, str):
            return header_expectation(first, second)
        raise ExpectationArgumentError(f"unsupported expect() arguments: {first!r}, {second!r}")

    raise ExpectationArgumentError(f"expect() takes 1 or 2 arguments plus an optional callback, got {len(args)}")


_BODY_FIRST = (TextBodyExpectation, PatternBodyExpectation, StructuredBodyExpectation, StatusBodyExpectation)


class ExpectationQueue:
    """Ordered, append-only list of descriptors evaluated against one response."""

    def __init__(self) -> None:
        self._items: list[Expectation] = []

    def add(self, expectation: Expectation) -> None:
        self._items.append(expectation)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Expectation]:
        return iter(tuple(self._items))

    def run(self, response: httpx.Response) -> BaseException | None:
        """
        Evaluate against ``response`` and return the first failure, if any.

        Body checks (including a combined status+body) run ahead of status, header
        and predicate checks; each group keeps its registration order.
        """
        ordered = sorted(enumerate(self._items), key=lambda item: not isinstance(item[1], _BODY_FIRST))
        for index, expectation in ordered:
            error = expectation.check(response)
            if error is not None:
                logger.debug("expectation #%d (%s) failed: %s", index, type(expectation).__name__, error)
                return error
        return None


__all__ = [
    "BodyExpectation",
    "Expectation",
    "ExpectationQueue",
    "HeaderExpectation",
    "PatternBodyExpectation",
    "PredicateExpectation",
    "StatusBodyExpectation",
    "StatusExpectation",
    "StructuredBodyExpectation",
    "TextBodyExpectation",
    "body_expectation",
    "build_expectation",
    "describe_pattern",
    "header_expectation",
    "reason_phrase",
]
