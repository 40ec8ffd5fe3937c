"""
User account use cases.

Passwords are hashed here, never in the repository, and e-mail/username
uniqueness is checked before the insert so the caller gets a clear message.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from storyapi.core.security import hash_password
from storyapi.db.models import User
from storyapi.repositories.errors import UNIQUE_VIOLATION, DBError, NotFoundError
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.schemas import UserPayload

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        repository: Optional[SQLRepository] = None,
        hasher: Callable[[str], str] = hash_password,
    ) -> None:
        self.repository = repository or SQLRepository()
        self.hasher = hasher

    def create(self, payload: UserPayload) -> int:
        if self.repository.email_or_username_exists(payload.email, payload.username):
            raise DBError(UNIQUE_VIOLATION)
        user_id = self.repository.create_user(
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            password_hash=self.hasher(payload.password),
            email=payload.email,
        )
        logger.info("user %s created", user_id)
        return user_id

    def find_by_id(self, user_id: int) -> User:
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError()
        return user

    def find_users(self) -> list[User]:
        return self.repository.list_users()

    def update(self, user_id: int, payload: UserPayload) -> None:
        if self.repository.email_or_username_exists(payload.email, payload.username, exclude_id=user_id):
            raise DBError(UNIQUE_VIOLATION)
        self.repository.update_user(
            user_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            password_hash=self.hasher(payload.password),
            email=payload.email,
        )

    def delete_by_id(self, user_id: int) -> None:
        self.repository.delete_user(user_id)
