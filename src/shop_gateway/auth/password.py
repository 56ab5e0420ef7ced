"""Password hashing with the ``bcrypt`` library (>=4.0), used directly."""

import bcrypt

_ROUNDS = 12


def hash_password(plain: str) -> str:
    """Return a utf-8 bcrypt hash for a plain-text password."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
