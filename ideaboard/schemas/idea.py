"""Idea Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ideaboard.models.idea import IdeaStatus
from ideaboard.schemas.comment import CommentOut
from ideaboard.schemas.common import ApiModel, NameRef


class IdeaCreate(ApiModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category_id: int


class IdeaStatusUpdate(ApiModel):
    status: IdeaStatus


class IdeaUpdate(ApiModel):
    """Admin edit; any subset of the fields."""
    status: Optional[IdeaStatus] = None
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)


class IdeaOut(ApiModel):
    id: int
    title: str
    description: str
    status: IdeaStatus
    author_id: int
    category_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: NameRef
    category: NameRef
    vote_count: int = 0
    comment_count: int = 0


class IdeaDetail(IdeaOut):
    comments: List[CommentOut] = []
