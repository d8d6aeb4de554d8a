"""Pydantic schemas for posts, comments and paginated listings."""
from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import AliasChoices, Field

from .users import ServerModel, UserSummary

ItemT = TypeVar("ItemT")


class Pagination(ServerModel):
    """Paging metadata attached to every list endpoint."""

    page: int = 1
    limit: int = 10
    total: int = 0
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False


class Page(ServerModel, Generic[ItemT]):
    """The paginated-list shape: ``{data: [...], pagination: {...}}``."""

    data: list[ItemT] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class Post(ServerModel):
    """Serialized representation of a post."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    title: str = ""
    content: str = ""
    author: UserSummary | str | None = None
    likes: list[str] = Field(default_factory=list)
    comments: list[str] = Field(default_factory=list)
    re_posts: list[str] = Field(default_factory=list)
    mentions: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def liked_by(self, user_id: str) -> bool:
        return user_id in self.likes


class Comment(ServerModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    content: str
    author: UserSummary | str | None = None
    post: str | None = None
    parent_comment: str | None = None
    mentions: list[str] = Field(default_factory=list)
    likes: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostWrite(ServerModel):
    """Payload used when creating or editing a post."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class CommentCreate(ServerModel):
    post_id: str
    content: str = Field(..., min_length=1, max_length=500)
    parent_comment_id: str | None = None
