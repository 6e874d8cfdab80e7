# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for httpexpect."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"httpexpect/{__version__}"
DEFAULT_BIND_HOST = "127.0.0.1"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ClientSettings:
    """Defaults for the HTTP client and the ephemeral server binder."""

    timeout: float = 10.0
    follow_redirects: bool = False
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    bind_host: str = DEFAULT_BIND_HOST
    poll_interval: float = 0.05

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        poll_interval = _float_env("HTTPEXPECT_POLL_INTERVAL", cls.poll_interval)
        if poll_interval <= 0:
            poll_interval = cls.poll_interval
        return cls(
            timeout=_float_env("HTTPEXPECT_TIMEOUT", cls.timeout),
            follow_redirects=_bool_env("HTTPEXPECT_FOLLOW_REDIRECTS", cls.follow_redirects),
            verify_ssl=_bool_env("HTTPEXPECT_VERIFY_SSL", cls.verify_ssl),
            user_agent=os.getenv("HTTPEXPECT_USER_AGENT", cls.user_agent),
            bind_host=os.getenv("HTTPEXPECT_BIND_HOST", cls.bind_host) or cls.bind_host,
            poll_interval=poll_interval,
        )


def load_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
