"""Blog post use cases."""

from __future__ import annotations

from typing import Optional

from storyapi.db.models import Blog
from storyapi.repositories.errors import NotFoundError
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.schemas import BlogPayload


class BlogService:
    def __init__(self, repository: Optional[SQLRepository] = None) -> None:
        self.repository = repository or SQLRepository()

    def create(self, payload: BlogPayload) -> int:
        return self.repository.create_blog(
            title=payload.title,
            content=payload.content,
            author_id=payload.author_id,
            slug=payload.slug,
            excerpt=payload.excerpt,
            status=str(payload.status),
            published_at=payload.published_at,
        )

    def find_by_id(self, blog_id: int) -> Blog:
        blog = self.repository.get_blog(blog_id)
        if blog is None:
            raise NotFoundError()
        return blog

    def find_blogs(self) -> list[Blog]:
        return self.repository.list_blogs()

    def update(self, blog_id: int, payload: BlogPayload) -> None:
        self.repository.update_blog(
            blog_id,
            title=payload.title,
            content=payload.content,
            slug=payload.slug,
            excerpt=payload.excerpt,
            status=str(payload.status),
            published_at=payload.published_at,
        )

    def delete_by_id(self, blog_id: int) -> None:
        self.repository.delete_blog(blog_id)
