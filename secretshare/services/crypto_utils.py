from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

# Argon2id: time_cost=3, memory_cost=65536 (64MB), parallelism=4
ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,
    parallelism=4,
    hash_len=32,
    salt_len=16,
)


def hash_password(password: str) -> str:
    """Hash a secret's access password using Argon2id."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a submitted password against its Argon2id hash.

    Only a mismatch returns False. A corrupt hash raises, and callers treat
    that as an internal error rather than a wrong password.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
