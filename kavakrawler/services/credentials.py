"""Password hashing. Stateless wrappers around Werkzeug's salted hash helpers."""

from werkzeug.security import generate_password_hash, check_password_hash

# pbkdf2-sha256 with a fixed work factor; the method string is stored in the hash
HASH_METHOD = 'pbkdf2:sha256:600000'
SALT_LENGTH = 16


def hash_password(password: str) -> str:
    return generate_password_hash(password, method=HASH_METHOD, salt_length=SALT_LENGTH)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check. A malformed or empty hash counts as a mismatch."""
    if not password_hash or password is None:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        return False
