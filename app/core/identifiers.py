"""
Short random tokens.

click ids      → 12 chars of [0-9a-z] ≈ 62 bits, appended to the redirect URL
session tokens → same shape, stored in the visitor cookie
slug suffixes  → shorter tokens for fallback slugs ("link-x3f9ab")
"""

import secrets

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
TOKEN_LENGTH = 12


def random_token(size: int = TOKEN_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(size))


def new_click_id() -> str:
    return random_token(TOKEN_LENGTH)


def new_session_token() -> str:
    return random_token(TOKEN_LENGTH)
