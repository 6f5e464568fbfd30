"""Password hashing with the ``bcrypt`` library (>=4.0).

Stored hashes are utf-8 strings of the full bcrypt digest (salt included).
"""

import bcrypt


def hash_password(plain: str) -> str:
    """Hash a plain-text password with a fresh salt."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time check of a plain-text password against a stored hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
