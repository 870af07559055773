# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server-rendered admin pages.

Nothing in here is a security control; see admingate.permissions for the
real gate.
"""
