"""
Token authentication for the portal API.

Clients send either ``Authorization: Token <key>`` (the key issued at
login) or ``Authorization: Bearer <jwt>``.  This class handles the
former and lives apart from the views so settings can import it
without pulling in view modules.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """Token authentication using the ``Token`` keyword."""

    keyword = 'Token'
