"""Comment Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ideaboard.schemas.common import ApiModel, NameRef


class CommentCreate(ApiModel):
    content: str = Field(min_length=1)
    idea_id: int


class CommentBody(ApiModel):
    """Body for ``POST /ideas/{id}/comments`` where the idea is in the path."""
    content: str = Field(min_length=1)


class CommentOut(ApiModel):
    id: int
    content: str
    idea_id: int
    user_id: int
    created_at: Optional[datetime] = None
    user: NameRef


class IdeaCommentOut(ApiModel):
    id: int
    content: str
    created_at: Optional[datetime] = None
    author: NameRef
