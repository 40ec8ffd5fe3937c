"""
Authentication use cases: check credentials, then issue a refresh token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional

from storyapi.core.config import get_settings
from storyapi.core.security import verify_password
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "invalid credentials"):
        super().__init__(message)
        self.message = message


@dataclass
class LoginSuccess:
    user_id: int
    refresh_token: str


@dataclass
class AuthService:
    """Handles login and refresh token issuance."""

    repository: Optional[SQLRepository] = None
    issuer_factory: Optional[Callable[[], TokenIssuer]] = None

    def __post_init__(self):
        self.settings = get_settings()
        if self.repository is None:
            self.repository = SQLRepository()
        if self.issuer_factory is None:
            self.issuer_factory = self._default_issuer

    def _default_issuer(self) -> TokenIssuer:
        # Expiry is fixed per issuer, so build one per login to get now + ttl.
        return TokenIssuer.with_ttl(
            self.settings.refresh_token_secret,
            self.repository,
            timedelta(seconds=self.settings.refresh_token_ttl_seconds),
            save_timeout=self.settings.token_save_timeout_seconds,
        )

    def login(self, login: str, password: str) -> LoginSuccess:
        raw_login = (login or "").strip()
        if not raw_login:
            raise InvalidCredentialsError()
        user = self.repository.get_user_by_login(raw_login)
        if not user or not verify_password(password, user.password):
            logger.warning("failed login for %r", raw_login)
            raise InvalidCredentialsError()
        token = self.issuer_factory().generate_token(user.id)
        return LoginSuccess(user_id=user.id, refresh_token=token)
