# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-admin bootstrap, login and bearer-token gate."""

__version__ = "0.1.0"
