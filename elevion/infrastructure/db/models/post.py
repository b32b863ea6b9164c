"""
Feed post model.
"""

from typing import List, Optional

from pydantic import ConfigDict
from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel

from elevion.domain.statuses import PostStatus
from elevion.infrastructure.db.models.base import IntIdMixin, JSONType, TimestampMixin


class Post(IntIdMixin, TimestampMixin, table=True):
    """Blog/feed content searchable by title, content and category."""

    __tablename__ = "posts"

    title: str = Field(..., max_length=300)
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    author_id: Optional[int] = Field(default=None, foreign_key="users.id")
    category: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False))
    image_url: Optional[str] = Field(default=None)
    status: str = Field(default=PostStatus.PUBLISHED.value, max_length=20)
    view_count: int = Field(default=0)
    like_count: int = Field(default=0)


class PostCreate(SQLModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: str = Field(..., min_length=1, max_length=300)
    content: str = Field(..., min_length=1)
    author_id: Optional[int] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    status: PostStatus = PostStatus.PUBLISHED
