"""Story use cases: word counts are recomputed and classified before anything is stored."""

from __future__ import annotations

import logging
from typing import Optional

from storyapi.db.models import Story
from storyapi.domain.stories import StoryType, render_story_type, validate_word_count
from storyapi.domain.words import count_words
from storyapi.repositories.errors import NotFoundError
from storyapi.repositories.sql_repository import SQLRepository
from storyapi.schemas import StoryPayload

logger = logging.getLogger(__name__)


class StoryService:
    def __init__(self, repository: Optional[SQLRepository] = None) -> None:
        self.repository = repository or SQLRepository()

    def _classify(self, payload: StoryPayload) -> tuple[StoryType, int]:
        word_count = count_words(payload.content)
        validate_word_count(payload.type, word_count)
        return StoryType.from_value(payload.type), word_count

    def create(self, payload: StoryPayload) -> int:
        story_type, word_count = self._classify(payload)
        story_id = self.repository.create_story(
            title=payload.title,
            content=payload.content,
            author_id=payload.author_id,
            slug=payload.slug,
            excerpt=payload.excerpt,
            status=str(payload.status),
            story_type=render_story_type(story_type),
            word_count=word_count,
            published_at=payload.published_at,
        )
        logger.info("story %s created (%s, %d words)", story_id, story_type, word_count)
        return story_id

    def find_by_id(self, story_id: int) -> Story:
        story = self.repository.get_story(story_id)
        if story is None:
            raise NotFoundError()
        return story

    def find_stories(self) -> list[Story]:
        return self.repository.list_stories()

    def update(self, story_id: int, payload: StoryPayload) -> None:
        story_type, word_count = self._classify(payload)
        self.repository.update_story(
            story_id,
            title=payload.title,
            content=payload.content,
            slug=payload.slug,
            excerpt=payload.excerpt,
            story_type=render_story_type(story_type),
            word_count=word_count,
        )

    def delete_by_id(self, story_id: int) -> None:
        self.repository.delete_story(story_id)
