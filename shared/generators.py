"""
Random code and token generators — pure, side-effect-free functions.

All generators use the ``secrets`` module; every value produced here ends up
guarding a login.
"""

from __future__ import annotations

import secrets

VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999


def generate_verification_code() -> str:
    """Generate a 6-digit double-check code.

    Uniformly distributed over [100000, 999999] inclusive, so the result never
    has a leading zero and is always exactly six characters.
    """
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    return str(VERIFICATION_CODE_MIN + secrets.randbelow(span))


def generate_session_id(length: int = 32) -> str:
    """Generate an opaque session identifier.

    Args:
        length: Number of random bytes before base64 encoding (default 32).

    Returns:
        URL-safe base64-encoded token string.
    """
    return secrets.token_urlsafe(length)
