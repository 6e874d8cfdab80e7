# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging setup for httpexpect.

The package logs under ``httpexpect.*``: ``httpexpect.server`` records ephemeral binds,
shutdowns and handled requests, ``httpexpect.builder`` records dispatch and categorized
failures, and ``httpexpect.expectations`` names the descriptor that failed. All of it is
DEBUG level, so nothing shows up unless a test session asks for it.
"""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("HTTPEXPECT_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None) -> None:
    """
    Route httpexpect records to stderr, e.g. ``setup_logging("DEBUG")`` from a conftest.

    ``level`` falls back to ``HTTPEXPECT_LOG_LEVEL`` (default ``WARNING``).
    """
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


__all__ = ["setup_logging"]
