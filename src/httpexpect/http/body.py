# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Structured body extraction for responses."""

from __future__ import annotations

import json
from typing import Any

import httpx

from .headers import header_value


def is_json_content_type(content_type: str | None) -> bool:
    """True for ``application/json`` and ``+json`` suffixed media types."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def parsed_body(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or ``None`` when the response is not JSON."""
    if not is_json_content_type(header_value(response.headers, "content-type")):
        return None
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


__all__ = ["is_json_content_type", "parsed_body"]
