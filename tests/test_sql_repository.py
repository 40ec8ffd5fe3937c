"""
Tests for the SQLRepository, mostly against a temporary SQLite database.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from storyapi.core.deadline import Deadline, DeadlineExceededError
from storyapi.db.create_tables import main as create_tables_main
from storyapi.repositories.errors import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    DBError,
    NotFoundError,
)
from storyapi.repositories import sql_repository
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.services.token_service import Token


def _user(repo: SQLRepository, username: str = "alice01", email: str = "alice@example.com") -> int:
    return repo.create_user(
        first_name="Alice",
        last_name="Liddell",
        username=username,
        password_hash="hash",
        email=email,
    )


def test_user_crud(temp_db):
    repo = SQLRepository()
    user_id = _user(repo)

    user = repo.get_user(user_id)
    assert user is not None
    assert user.username == "alice01"
    assert repo.get_user_by_login("alice@example.com").id == user_id
    assert repo.get_user_by_login("alice01").id == user_id
    assert repo.email_or_username_exists("other@example.com", "alice01")
    assert not repo.email_or_username_exists("alice@example.com", "x", exclude_id=user_id)

    repo.update_user(
        user_id,
        first_name="Alicia",
        last_name="Liddell",
        username="alice01",
        password_hash="new-hash",
        email="alice@example.com",
    )
    assert repo.get_user(user_id).first_name == "Alicia"

    repo.delete_user(user_id)
    assert repo.get_user(user_id) is None
    with pytest.raises(NotFoundError):
        repo.delete_user(user_id)


def test_duplicate_user_is_unique_violation(temp_db):
    repo = SQLRepository()
    _user(repo)
    with pytest.raises(DBError) as info:
        _user(repo, username="alice02")
    assert info.value.code == UNIQUE_VIOLATION
    assert info.value.message == "user with a given email or username already exist"
    assert info.value == DBError(UNIQUE_VIOLATION, "different text")


def test_story_flow_embeds_author(temp_db):
    repo = SQLRepository()
    author_id = _user(repo)
    story_id = repo.create_story(
        title="Tiny",
        content="word " * 150,
        author_id=author_id,
        slug="tiny",
        excerpt=None,
        status="draft",
        story_type="flash_fiction",
        word_count=150,
    )

    story = repo.get_story(story_id)
    assert story.type == "flash_fiction"
    assert story.word_count == 150
    assert story.author.username == "alice01"

    repo.update_story(
        story_id,
        title="Tiny II",
        content="word " * 200,
        slug="tiny-2",
        excerpt="short",
        story_type="flash_fiction",
        word_count=200,
    )
    stories = repo.list_stories()
    assert [s.title for s in stories] == ["Tiny II"]
    assert stories[0].updated_at is not None

    repo.delete_story(story_id)
    assert repo.get_story(story_id) is None
    with pytest.raises(NotFoundError):
        repo.update_story(story_id, title="x", content="x", slug="x", excerpt=None, story_type="novella", word_count=1)


def test_story_with_unknown_author_is_foreign_key_violation(temp_db):
    repo = SQLRepository()
    with pytest.raises(DBError) as info:
        repo.create_story(
            title="Orphan",
            content="text",
            author_id=999,
            slug="orphan",
            excerpt=None,
            status="draft",
            story_type="novella",
            word_count=1,
        )
    assert info.value.code == FOREIGN_KEY_VIOLATION


def test_blog_flow(temp_db):
    repo = SQLRepository()
    author_id = _user(repo)
    blog_id = repo.create_blog(
        title="Hello", content="First post", author_id=author_id, slug="hello", excerpt=None, status="draft"
    )
    published = datetime(2024, 5, 1, tzinfo=timezone.utc)
    repo.update_blog(
        blog_id, title="Hello", content="First post", slug="hello", excerpt=None, status="published", published_at=published
    )
    blog = repo.get_blog(blog_id)
    assert blog.status == "published"
    assert blog.author.email == "alice@example.com"
    assert len(repo.list_blogs()) == 1
    repo.delete_blog(blog_id)
    with pytest.raises(NotFoundError):
        repo.delete_blog(blog_id)


def test_save_token_persists_hash(temp_db):
    repo = SQLRepository()
    user_id = _user(repo)
    expires = datetime.now(timezone.utc) + timedelta(days=7)

    repo.save_token(Token(token_hash="argon2$abc", user_id=user_id, expires_at=expires), Deadline.after(1.0))

    rows = repo.list_refresh_tokens(user_id)
    assert len(rows) == 1
    assert rows[0].token_hash == "argon2$abc"
    assert rows[0].revoked is False


def test_save_token_respects_elapsed_deadline(temp_db):
    repo = SQLRepository()
    user_id = _user(repo)
    expired = Deadline(expires_at=time.monotonic() - 1)

    with pytest.raises(DeadlineExceededError):
        repo.save_token(Token(token_hash="h", user_id=user_id, expires_at=datetime.now(timezone.utc)), expired)
    assert repo.list_refresh_tokens(user_id) == []


def test_create_tables_rebuilds_schema(temp_db):
    repo = SQLRepository()
    _user(repo)
    create_tables_main(["--drop"])

    assert repo.list_users() == []


class _FakeSession:
    def __init__(self, dialect: str, flush_error: Exception | None = None):
        self.bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect))
        self.flush_error = flush_error
        self.statements: list[str] = []
        self.committed = False

    def get_bind(self):
        return self.bind

    def execute(self, stmt):
        self.statements.append(str(stmt))

    def add(self, entity):
        pass

    def flush(self):
        if self.flush_error is not None:
            raise self.flush_error

    def commit(self):
        self.committed = True


def _use_session(monkeypatch, session: _FakeSession) -> None:
    @contextmanager
    def fake_get_session():
        yield session

    monkeypatch.setattr(sql_repository, "get_session", fake_get_session)


def _token() -> Token:
    return Token(token_hash="h", user_id=1, expires_at=datetime.now(timezone.utc))


def test_save_token_bounds_postgres_statements_by_time_left(monkeypatch):
    session = _FakeSession("postgresql")
    _use_session(monkeypatch, session)

    SQLRepository().save_token(_token(), Deadline.after(1.0))

    assert len(session.statements) == 1
    assert session.statements[0].startswith("SET LOCAL statement_timeout = ")
    assert 0 < int(session.statements[0].rsplit(" ", 1)[1]) <= 1000
    assert session.committed


def test_save_token_sets_no_timeout_outside_postgres(monkeypatch):
    session = _FakeSession("sqlite")
    _use_session(monkeypatch, session)

    SQLRepository().save_token(_token(), Deadline.after(1.0))

    assert session.statements == []
    assert session.committed


def test_cancelled_insert_surfaces_as_deadline_exceeded(monkeypatch):
    canceled = OperationalError("INSERT", {}, SimpleNamespace(pgcode="57014"))
    session = _FakeSession("postgresql", flush_error=canceled)
    _use_session(monkeypatch, session)

    with pytest.raises(DeadlineExceededError):
        SQLRepository().save_token(_token(), Deadline.after(1.0))
    assert not session.committed


def test_other_operational_errors_stay_database_errors(monkeypatch):
    broken = OperationalError("INSERT", {}, SimpleNamespace(pgcode="08006"))
    _use_session(monkeypatch, _FakeSession("postgresql", flush_error=broken))

    with pytest.raises(DBError):
        SQLRepository().save_token(_token(), Deadline.after(1.0))
