"""Category Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ideaboard.schemas.common import ApiModel


class CategoryCreate(ApiModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
