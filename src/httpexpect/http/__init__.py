# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .body import is_json_content_type, parsed_body
from .client import HttpClient, create_default_http_client
from .headers import header_value

__all__ = [
    "HttpClient",
    "create_default_http_client",
    "header_value",
    "is_json_content_type",
    "parsed_body",
]
