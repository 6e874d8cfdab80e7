# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from .context import bind_current_test, current_test

__all__ = ["bind_current_test", "current_test"]
