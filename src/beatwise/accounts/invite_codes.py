"""Invite code generation for referrals.

Codes are 8-character alphanumeric (A-Z, 0-9), generated server-side with a
cryptographic random source when an account is created. Users cannot choose
their own codes.
"""

from __future__ import annotations

import secrets
import string

INVITE_CHARSET = string.ascii_uppercase + string.digits  # A-Z, 0-9
INVITE_LENGTH = 8
MAX_GENERATION_ATTEMPTS = 10


def generate_invite_code() -> str:
    """Generate a cryptographically random 8-character invite code."""
    return "".join(secrets.choice(INVITE_CHARSET) for _ in range(INVITE_LENGTH))


def normalize_invite_code(code: str) -> str:
    """Normalize an invite code for case-insensitive lookup."""
    return (code or "").strip().upper()
