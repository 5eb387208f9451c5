"""Tests for waai_app.core.pin_hasher."""

from __future__ import annotations

from waai_app.core.pin_hasher import hash_pin, verify_pin


def test_hash_is_salted_and_verifiable():
    first = hash_pin("1234")
    second = hash_pin("1234")
    assert first != second
    assert "1234" not in first
    assert verify_pin("1234", first)
    assert verify_pin("1234", second)
    assert not verify_pin("4321", first)


def test_missing_or_malformed_hash_never_matches():
    assert not verify_pin("1234", None)
    assert not verify_pin("1234", "")
    assert not verify_pin("1234", "not-a-bcrypt-hash")
