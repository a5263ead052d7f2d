"""Credential hashing for the user table (Argon2 via pwdlib)."""

from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    """Hash a plain password for storage."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return password_hash.hash(password)


def check_credentials(plain_password: str, hashed_password: str) -> tuple[bool, str | None]:
    """Verify a login attempt.

    Returns ``(valid, new_hash)``; ``new_hash`` is set when the stored hash uses
    outdated parameters and should be replaced.
    """
    return password_hash.verify_and_update(plain_password, hashed_password)
