"""Salted one-way hashing for teacher PINs."""

from __future__ import annotations

import bcrypt


def hash_pin(pin: str) -> str:
    return bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt()).decode("ascii")


def verify_pin(pin: str, hashed_pin: str | None) -> bool:
    """Check ``pin`` against a stored hash; malformed or missing hashes never match."""
    if not hashed_pin:
        return False
    try:
        return bcrypt.checkpw(pin.encode("utf-8"), hashed_pin.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False
