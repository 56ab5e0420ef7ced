"""Unit tests for password hashing utilities."""

from src.shop_gateway.auth.password import hash_password, verify_password


def test_hash_is_not_plain():
    hashed = hash_password("MySecret1")
    assert hashed != "MySecret1"
    assert hashed.startswith("$2b$12$")


def test_verify_correct_password():
    assert verify_password("MySecret1", hash_password("MySecret1")) is True


def test_verify_wrong_password():
    assert verify_password("WrongPass9", hash_password("MySecret1")) is False


def test_malformed_hash_is_rejected():
    assert verify_password("MySecret1", "not-a-bcrypt-hash") is False
