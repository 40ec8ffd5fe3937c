"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str | bytes) -> str:
    """Create an Argon2 hash with a prefix for detection.

    Accepts raw bytes as well, so digests can be passed through unchanged.
    """
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str | bytes, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHash):
        return False
