"""
Password credential hashing.

bcrypt with a configurable work factor (default 10). Plaintext passwords
never leave this module in stored form.
"""

import bcrypt

DEFAULT_BCRYPT_COST = 10

# Used when no account exists so that login always pays for one bcrypt check.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(
    b"dummy_password_for_timing_safety", bcrypt.gensalt(DEFAULT_BCRYPT_COST)
).decode()


def hash_password(password: str, cost: int = DEFAULT_BCRYPT_COST) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=cost)).decode()


def check_password(password: str, password_hash: str | None) -> bool:
    """
    Constant-time password verification.

    A missing hash is compared against a dummy hash and always fails.
    """
    if password_hash is None:
        bcrypt.checkpw(password.encode(), _DUMMY_BCRYPT_HASH.encode())
        return False
    return bcrypt.checkpw(password.encode(), password_hash.encode())
