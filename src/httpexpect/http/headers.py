# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header lookup for expectations."""

from __future__ import annotations

import httpx


def header_value(headers: httpx.Headers, name: str) -> str | None:
    """
    Return the value of ``name``, or ``None`` when the field is absent.

    Matching is case-insensitive; a present-but-empty field yields ``""``, and
    repeated fields come back joined with ``", "``.
    """
    return headers.get(name)


__all__ = ["header_value"]
