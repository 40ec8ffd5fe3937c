"""Story types, statuses and the word-count rules that tie them together."""
from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional


class StoryStatus(IntEnum):
    DRAFT = 0
    PUBLISHED = 1
    ARCHIVED = 2

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_value(cls, value: Any) -> Optional["StoryStatus"]:
        """Resolve a member from itself, its int value or its canonical string."""
        return _lookup(cls, value)


class StoryType(IntEnum):
    FLASH_FICTION = 1
    SHORT_STORY = 2
    NOVELETTE = 3
    NOVELLA = 4

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_value(cls, value: Any) -> Optional["StoryType"]:
        """Resolve a member from itself, its int value or its canonical string."""
        return _lookup(cls, value)


def _lookup(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return enum_cls(value)
        except ValueError:
            return None
    if isinstance(value, str):
        key = value.strip().upper()
        if key.isascii() and key.isdigit():
            return _lookup(enum_cls, int(key))
        return enum_cls.__members__.get(key)
    return None


def render_story_type(value: Any) -> str:
    """Canonical string for a story type; empty for anything that is not one."""
    story_type = StoryType.from_value(value)
    return str(story_type) if story_type is not None else ""


# (exclusive lower bound, inclusive upper bound) per type.
WORD_BANDS: dict[StoryType, tuple[int, int]] = {
    StoryType.FLASH_FICTION: (100, 1000),
    StoryType.SHORT_STORY: (1000, 7500),
    StoryType.NOVELETTE: (7500, 20_000),
    StoryType.NOVELLA: (20_000, 40_000),
}

_BAND_REASONS = {
    StoryType.FLASH_FICTION: "word count for flash fiction should be between 100 and 1000",
    StoryType.SHORT_STORY: "word count for short story should be between 1000 and 7500",
    StoryType.NOVELETTE: "word count for novelette should be between 7500 and 20,000",
    StoryType.NOVELLA: "word count for novella should be between 20,000 and 40,000",
}

INVALID_TYPE_REASON = "invalid story type"


class StoryValidationError(Exception):
    """Raised when a story's word count does not fit its declared type.

    Two errors are the same *kind* when they were raised for the same declared
    type, whatever their counts or messages; use ``matches`` for that coarse
    comparison.
    """

    def __init__(self, story_type: Any, word_count: int, reason: str):
        self.story_type = story_type
        self.word_count = word_count
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"story error: {self.reason} "
            f"(story type: {render_story_type(self.story_type)}, word count: {self.word_count})"
        )

    @property
    def kind(self) -> Any:
        """The declared type: its StoryType member if it has one, else the raw value."""
        resolved = StoryType.from_value(self.story_type)
        return resolved if resolved is not None else self.story_type

    def matches(self, other: object) -> bool:
        if not isinstance(other, StoryValidationError):
            return False
        return self.kind == other.kind


def validate_word_count(story_type: Any, word_count: int) -> None:
    """Raise StoryValidationError unless word_count fits the band of story_type."""
    resolved = StoryType.from_value(story_type)
    if resolved is None:
        raise StoryValidationError(story_type, word_count, INVALID_TYPE_REASON)
    low, high = WORD_BANDS[resolved]
    if word_count <= low or word_count > high:
        raise StoryValidationError(resolved, word_count, _BAND_REASONS[resolved])
