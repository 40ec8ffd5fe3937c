"""
Refresh token issuance.

A token is produced in four steps: build claims, sign them, hash the signed
value and hand the hash to a TokenSaver. Each step has its own error type so
callers can tell where issuance stopped; only the signed value is returned,
only its hash is stored.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

import jwt
from jwt.algorithms import HMACAlgorithm

from storyapi.core.deadline import Deadline
from storyapi.core.security import hash_password

DEFAULT_SAVE_TIMEOUT_SECONDS = 1.0


class TokenError(Exception):
    """Base class for token issuance failures."""

    prefix = "token error"

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(f"{self.prefix}: {cause}")


class SigningError(TokenError):
    prefix = "failed to sign token"


class HashingError(TokenError):
    prefix = "failed to hash token"


class SaveError(TokenError):
    prefix = "failed to save token"


class HashUnavailableError(Exception):
    def __init__(self, message: str = "the requested hash function is unavailable"):
        super().__init__(message)


@dataclass(frozen=True)
class Token:
    token_hash: str
    user_id: int
    expires_at: datetime
    revoked: bool = False


@dataclass(frozen=True)
class UserClaims:
    user_id: int
    expires_at: datetime

    def to_payload(self) -> dict:
        return {"id": self.user_id, "exp": int(self.expires_at.timestamp())}

    @classmethod
    def from_payload(cls, payload: dict) -> "UserClaims":
        return cls(
            user_id=int(payload["id"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )


class TokenSaver(Protocol):
    def save_token(self, token: Token, deadline: Deadline) -> None: ...


class Signer(Protocol):
    def sign(self, claims: UserClaims) -> str: ...


def _resolve_hash(hash_name: str):
    name = (hash_name or "").lower()
    constructor = getattr(hashlib, name, None)
    if name not in hashlib.algorithms_available or not callable(constructor):
        raise HashUnavailableError()
    return constructor


_HMAC_ALGORITHMS = {"sha256": "HS256", "sha384": "HS384", "sha512": "HS512"}


def _algorithm_for(hash_name: str) -> str:
    name = (hash_name or "").lower()
    return _HMAC_ALGORITHMS.get(name, f"HMAC-{name.upper()}")


class HMACSigner:
    """Compact JWS signer using HMAC over a named hashlib digest.

    The header ``alg`` follows the digest: sha256/384/512 sign as the standard
    HS256/384/512, any other digest under a non-standard ``HMAC-<NAME>`` label.
    The digest is looked up when signing, so a signer configured with a hash
    that this interpreter does not provide fails at sign time.
    """

    def __init__(self, secret: str, *, hash_name: str = "sha256") -> None:
        self._secret = secret
        self.hash_name = hash_name
        self.algorithm = _algorithm_for(hash_name)

    def _jws(self) -> jwt.PyJWS:
        jws = jwt.PyJWS(algorithms=[])
        jws.register_algorithm(self.algorithm, HMACAlgorithm(_resolve_hash(self.hash_name)))
        return jws

    def sign(self, claims: UserClaims) -> str:
        payload = json.dumps(claims.to_payload(), separators=(",", ":")).encode("utf-8")
        return self._jws().encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str, *, now: Optional[datetime] = None) -> UserClaims:
        """Verify signature and expiry and return the embedded claims."""
        raw = self._jws().decode(token, self._secret, algorithms=[self.algorithm])
        claims = UserClaims.from_payload(json.loads(raw))
        current = now or datetime.now(timezone.utc)
        if claims.expires_at <= current:
            raise jwt.ExpiredSignatureError("Signature has expired")
        return claims


@dataclass(frozen=True)
class TokenIssuer:
    """Issues signed refresh tokens and records their hashes.

    ``expires_at`` is an absolute instant fixed when the issuer is built; every
    token from one issuer shares it. Use ``with_ttl`` to derive it from now.
    """

    secret: str = field(repr=False)
    saver: TokenSaver
    expires_at: datetime
    signer: Optional[Signer] = None
    hasher: Callable[[bytes], str] = hash_password
    save_timeout: float = DEFAULT_SAVE_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.signer is None:
            object.__setattr__(self, "signer", HMACSigner(self.secret))

    @classmethod
    def with_ttl(cls, secret: str, saver: TokenSaver, ttl: timedelta, **kwargs) -> "TokenIssuer":
        return cls(secret=secret, saver=saver, expires_at=datetime.now(timezone.utc) + ttl, **kwargs)

    def generate_token(self, user_id: int) -> str:
        claims = UserClaims(user_id=user_id, expires_at=self.expires_at)

        try:
            signed = self.signer.sign(claims)
        except Exception as exc:
            raise SigningError(exc) from exc

        try:
            token_hash = self.hasher(hashlib.sha256(signed.encode("utf-8")).digest())
        except Exception as exc:
            raise HashingError(exc) from exc

        token = Token(token_hash=token_hash, user_id=user_id, expires_at=self.expires_at)
        try:
            self.saver.save_token(token, Deadline.after(self.save_timeout))
        except Exception as exc:
            raise SaveError(exc) from exc

        return signed
