"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt salts automatically and
the hash is self-describing ("$2b$10$<salt><digest>"), so verification
needs nothing but the stored string. The work factor defaults to 10.
"""

import bcrypt

from fitgoals.config import settings

# bcrypt ignores everything past 72 bytes; newer releases raise instead.
BCRYPT_MAX_BYTES = 72


class PasswordHashError(Exception):
    """Raised when a stored hash is not a usable bcrypt hash."""


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt."""
    pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch. A malformed stored hash is a data fault,
    not a wrong password, so it raises PasswordHashError.
    """
    pw_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError) as e:
        raise PasswordHashError("Stored password hash is malformed") from e
