"""Request payloads bound from JSON bodies, and read models sent back."""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from storyapi.domain.blogs import BlogStatus
from storyapi.domain.stories import StoryStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


# -------------------------- requests --------------------------
class UserPayload(BaseModel):
    first_name: str = Field(min_length=3)
    last_name: str = Field(min_length=3)
    username: str = Field(min_length=6)
    password: str = Field(min_length=7)
    email: str = Field(pattern=EMAIL_PATTERN)


class StoryPayload(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    author_id: int = 0
    slug: str = Field(min_length=1, max_length=255)
    excerpt: Optional[str] = None
    status: StoryStatus = StoryStatus.DRAFT
    published_at: Optional[datetime] = None
    # bools and floats are rejected here, unknown ints and strings by the word-count rules
    type: Union[StrictInt, StrictStr]


class BlogPayload(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    author_id: int = Field(gt=0)
    slug: str = Field(min_length=1, max_length=255)
    excerpt: Optional[str] = None
    status: BlogStatus
    published_at: Optional[datetime] = None


class LoginPayload(BaseModel):
    login: str = Field(min_length=1)
    password: str = Field(min_length=1)


# -------------------------- responses --------------------------
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    username: str
    email: str


class StoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    author: AuthorOut
    slug: str
    excerpt: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    type: str
    word_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BlogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    author: AuthorOut
    slug: str
    excerpt: Optional[str] = None
    status: str
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
