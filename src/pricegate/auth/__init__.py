# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication and session lifecycle.

This package provides:
- Salted SHA-256 password digests
- Account store on top of the key-value storage (auth.users.v1)
- Single-slot session store (auth.session.v1)
- Signup/login controller and the session gate that unlocks the price view
"""
