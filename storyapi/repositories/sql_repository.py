"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import functools
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import and_, delete, exists, or_, select, text, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from storyapi.core.deadline import Deadline, DeadlineExceededError
from storyapi.db.models import Blog, RefreshToken, Story, User
from storyapi.db.session import get_session
from storyapi.repositories.errors import NotFoundError, translate_db_error

if TYPE_CHECKING:
    from storyapi.services.token_service import Token


def _translates_db_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc

    return wrapper


def _now() -> datetime:
    return datetime.now(timezone.utc)


# SQLSTATE for a statement cancelled by statement_timeout
_QUERY_CANCELED = "57014"


def _limit_statement_time(session, deadline: Deadline) -> None:
    """Cap every statement of the current PostgreSQL transaction at the time left."""
    if session.get_bind().dialect.name != "postgresql":
        return
    millis = max(1, int(deadline.remaining() * 1000))
    session.execute(text(f"SET LOCAL statement_timeout = {millis}"))


def _is_query_canceled(exc: OperationalError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return code == _QUERY_CANCELED


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    @_translates_db_errors
    def create_user(self, *, first_name: str, last_name: str, username: str, password_hash: str, email: str) -> int:
        now = _now()
        entity = User(
            first_name=first_name,
            last_name=last_name,
            username=username,
            password=password_hash,
            email=email,
            created_at=now,
            updated_at=now,
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            return entity.id

    @_translates_db_errors
    def get_user(self, user_id: int) -> Optional[User]:
        with get_session() as session:
            return session.get(User, user_id)

    @_translates_db_errors
    def get_user_by_login(self, login: str) -> Optional[User]:
        """Find a user by username or e-mail."""
        with get_session() as session:
            stmt = select(User).where(or_(User.username == login, User.email == login))
            return session.execute(stmt).scalars().first()

    @_translates_db_errors
    def list_users(self) -> list[User]:
        with get_session() as session:
            return list(session.execute(select(User).order_by(User.id)).scalars().all())

    @_translates_db_errors
    def email_or_username_exists(self, email: str, username: str, *, exclude_id: int | None = None) -> bool:
        with get_session() as session:
            condition = or_(User.email == email, User.username == username)
            if exclude_id is not None:
                condition = and_(condition, User.id != exclude_id)
            return bool(session.execute(select(exists().where(condition))).scalar())

    @_translates_db_errors
    def update_user(
        self,
        user_id: int,
        *,
        first_name: str,
        last_name: str,
        username: str,
        password_hash: str,
        email: str,
    ) -> None:
        with get_session() as session:
            stmt = (
                update(User)
                .where(User.id == user_id)
                .values(
                    first_name=first_name,
                    last_name=last_name,
                    username=username,
                    password=password_hash,
                    email=email,
                    updated_at=_now(),
                )
            )
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    @_translates_db_errors
    def delete_user(self, user_id: int) -> None:
        with get_session() as session:
            result = session.execute(delete(User).where(User.id == user_id))
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    # -------------------------- stories --------------------------
    @_translates_db_errors
    def create_story(
        self,
        *,
        title: str,
        content: str,
        author_id: int,
        slug: str,
        excerpt: str | None,
        status: str,
        story_type: str,
        word_count: int,
        published_at: datetime | None = None,
    ) -> int:
        entity = Story(
            title=title,
            content=content,
            author_id=author_id,
            slug=slug,
            excerpt=excerpt,
            status=status,
            published_at=published_at,
            type=story_type,
            word_count=word_count,
            created_at=_now(),
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            return entity.id

    @_translates_db_errors
    def get_story(self, story_id: int) -> Optional[Story]:
        with get_session() as session:
            return session.get(Story, story_id)

    @_translates_db_errors
    def list_stories(self) -> list[Story]:
        with get_session() as session:
            return list(session.execute(select(Story).order_by(Story.id)).scalars().all())

    @_translates_db_errors
    def update_story(
        self,
        story_id: int,
        *,
        title: str,
        content: str,
        slug: str,
        excerpt: str | None,
        story_type: str,
        word_count: int,
    ) -> None:
        with get_session() as session:
            stmt = (
                update(Story)
                .where(Story.id == story_id)
                .values(
                    title=title,
                    content=content,
                    slug=slug,
                    excerpt=excerpt,
                    type=story_type,
                    word_count=word_count,
                    updated_at=_now(),
                )
            )
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    @_translates_db_errors
    def delete_story(self, story_id: int) -> None:
        with get_session() as session:
            result = session.execute(delete(Story).where(Story.id == story_id))
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    # -------------------------- blogs --------------------------
    @_translates_db_errors
    def create_blog(
        self,
        *,
        title: str,
        content: str,
        author_id: int,
        slug: str,
        excerpt: str | None,
        status: str,
        published_at: datetime | None = None,
    ) -> int:
        entity = Blog(
            title=title,
            content=content,
            author_id=author_id,
            slug=slug,
            excerpt=excerpt,
            status=status,
            published_at=published_at,
            created_at=_now(),
        )
        with get_session() as session:
            session.add(entity)
            session.commit()
            return entity.id

    @_translates_db_errors
    def get_blog(self, blog_id: int) -> Optional[Blog]:
        with get_session() as session:
            return session.get(Blog, blog_id)

    @_translates_db_errors
    def list_blogs(self) -> list[Blog]:
        with get_session() as session:
            return list(session.execute(select(Blog).order_by(Blog.id)).scalars().all())

    @_translates_db_errors
    def update_blog(
        self,
        blog_id: int,
        *,
        title: str,
        content: str,
        slug: str,
        excerpt: str | None,
        status: str,
        published_at: datetime | None = None,
    ) -> None:
        with get_session() as session:
            stmt = (
                update(Blog)
                .where(Blog.id == blog_id)
                .values(
                    title=title,
                    content=content,
                    slug=slug,
                    excerpt=excerpt,
                    status=status,
                    published_at=published_at,
                    updated_at=_now(),
                )
            )
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    @_translates_db_errors
    def delete_blog(self, blog_id: int) -> None:
        with get_session() as session:
            result = session.execute(delete(Blog).where(Blog.id == blog_id))
            if result.rowcount == 0:
                raise NotFoundError()
            session.commit()

    # -------------------------- refresh tokens --------------------------
    @_translates_db_errors
    def save_token(self, token: "Token", deadline: Deadline) -> None:
        """Persist a refresh token hash, giving up once the deadline has passed.

        The deadline is checked before the insert and again before the commit.
        On PostgreSQL the transaction also gets a ``statement_timeout`` equal to
        the time left, so a blocked INSERT is cancelled by the server; other
        backends only get the two checks.
        """
        deadline.check()
        entity = RefreshToken(
            token_hash=token.token_hash,
            user_id=token.user_id,
            expires_at=token.expires_at,
            revoked=token.revoked,
        )
        with get_session() as session:
            _limit_statement_time(session, deadline)
            session.add(entity)
            try:
                session.flush()
            except OperationalError as exc:
                if _is_query_canceled(exc):
                    raise DeadlineExceededError() from exc
                raise
            # leaving the block without commit rolls the insert back
            deadline.check()
            session.commit()

    @_translates_db_errors
    def list_refresh_tokens(self, user_id: int) -> list[RefreshToken]:
        with get_session() as session:
            stmt = select(RefreshToken).where(RefreshToken.user_id == user_id).order_by(RefreshToken.id)
            return list(session.execute(stmt).scalars().all())
