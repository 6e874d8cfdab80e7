# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from ..config import ClientSettings, load_settings


class HttpClient(Protocol):
    """The subset of ``httpx.Client`` a request builder dispatches through."""

    cookies: httpx.Cookies

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response: ...

    def close(self) -> None:  # pragma: no cover - optional for test doubles
        ...


def create_default_http_client(settings: ClientSettings | None = None) -> httpx.Client:
    """Factory for the default httpx client used by requests and agents."""
    settings = settings or load_settings()
    return httpx.Client(
        follow_redirects=settings.follow_redirects,
        timeout=settings.timeout,
        verify=settings.verify_ssl,
        headers={"User-Agent": settings.user_agent},
    )
